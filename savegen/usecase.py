"""Application operations built on the repositories."""

from __future__ import annotations

from typing import TypeVar

from savegen.dto import (
    RequestError,
    TransactionCreateRequest,
    TransactionRequest,
    UserCreateRequest,
)
from savegen.entity import Book, Transaction, User
from savegen.repository import (
    BookRepository,
    TransactionCategoryRepository,
    TransactionRepository,
    TransactionTypeRepository,
    UserRepository,
)

_T = TypeVar("_T")


def _required(value: _T | None, name: str) -> _T:
    if value is None:
        raise RequestError(f"{name} is required")
    return value


class BookUsecase:
    """Book operations."""

    def __init__(self, book_repository: BookRepository) -> None:
        self.book_repository = book_repository

    def get_books(self) -> list[Book]:
        """Return every book."""
        return self.book_repository.get_all_books()


class TransactionUsecase:
    """Transaction operations."""

    def __init__(
        self,
        transaction_repository: TransactionRepository,
        transaction_type_repository: TransactionTypeRepository,
        transaction_category_repository: TransactionCategoryRepository,
    ) -> None:
        self.transaction_repository = transaction_repository
        self.transaction_type_repository = transaction_type_repository
        self.transaction_category_repository = transaction_category_repository

    def get_transactions(self, request: TransactionRequest) -> list[Transaction]:
        """Return the transactions matching the request's filters."""
        return self.transaction_repository.get_transactions(request)

    def create_transaction(self, request: TransactionCreateRequest) -> Transaction:
        """Resolve type and category by name and record a new transaction."""
        transaction_type = self.transaction_type_repository.get_transaction_type_by_name(
            _required(request.transaction_type, "transaction_type")
        )
        transaction_category = (
            self.transaction_category_repository.get_transaction_category_by_name(
                _required(request.transaction_category, "transaction_category")
            )
        )
        transaction = Transaction(
            user_id=_required(request.user_id, "user_id"),
            detail=_required(request.detail, "detail"),
            amount=_required(request.amount, "amount"),
            transaction_type_id=transaction_type.id,
            transaction_category_id=transaction_category.id,
            transaction_type=transaction_type,
            transaction_category=transaction_category,
        )
        return self.transaction_repository.create_transaction(transaction)


class UserUsecase:
    """User operations."""

    def __init__(self, user_repository: UserRepository) -> None:
        self.user_repository = user_repository

    def create_user(self, request: UserCreateRequest) -> User:
        """Register a user with the requested username."""
        return self.user_repository.create_user(User(username=request.username))