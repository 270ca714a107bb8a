"""Data access for books, users and transactions."""

from __future__ import annotations

from typing import TypeVar

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, contains_eager

from savegen.dto import TransactionRequest
from savegen.entity import (
    Base,
    Book,
    Transaction,
    TransactionCategory,
    TransactionType,
    User,
)

_Model = TypeVar("_Model", bound=Base)


class RecordNotFoundError(LookupError):
    """Raised when a lookup that expects one row finds none."""

    def __init__(self, message: str = "record not found") -> None:
        super().__init__(message)


def _save(session: Session, obj: _Model) -> _Model:
    session.add(obj)
    try:
        session.commit()
    except SQLAlchemyError:
        session.rollback()
        raise
    session.refresh(obj)
    return obj


def _first_by_name(session: Session, model: type[_Model], name: str) -> _Model:
    stmt = select(model).where(model.name == name).order_by(model.id).limit(1)
    found = session.scalars(stmt).first()
    if found is None:
        raise RecordNotFoundError()
    return found


class BookRepository:
    """Reads books."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_all_books(self) -> list[Book]:
        """Return every stored book."""
        return list(self.session.scalars(select(Book)).all())


class TransactionRepository:
    """Reads and records transactions."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_transactions(self, request: TransactionRequest) -> list[Transaction]:
        """Return transactions with their type and category, filtered by the request."""
        stmt = (
            select(Transaction)
            .outerjoin(Transaction.transaction_type)
            .outerjoin(Transaction.transaction_category)
            .options(
                contains_eager(Transaction.transaction_type),
                contains_eager(Transaction.transaction_category),
            )
        )
        if request.user_id is not None:
            stmt = stmt.where(Transaction.user_id == request.user_id)
        if request.transaction_type is not None:
            stmt = stmt.where(TransactionType.name == request.transaction_type)
        return list(self.session.scalars(stmt).all())

    def create_transaction(self, transaction: Transaction) -> Transaction:
        """Store a transaction and return it with its generated fields."""
        return _save(self.session, transaction)


class TransactionTypeRepository:
    """Looks up transaction types."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_transaction_type_by_name(self, name: str) -> TransactionType:
        """Return the first type with this name; raise RecordNotFoundError if none."""
        return _first_by_name(self.session, TransactionType, name)


class TransactionCategoryRepository:
    """Looks up transaction categories."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_transaction_category_by_name(self, name: str) -> TransactionCategory:
        """Return the first category with this name; raise RecordNotFoundError if none."""
        return _first_by_name(self.session, TransactionCategory, name)


class UserRepository:
    """Records users."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def create_user(self, user: User) -> User:
        """Store a user and return it with its generated fields."""
        return _save(self.session, user)