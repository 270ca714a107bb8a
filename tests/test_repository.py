import pytest
from sqlalchemy import create_engine, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from savegen.dto import TransactionRequest
from savegen.entity import (
    Base,
    Book,
    Transaction,
    TransactionCategory,
    TransactionType,
    User,
)
from savegen.repository import (
    BookRepository,
    RecordNotFoundError,
    TransactionCategoryRepository,
    TransactionRepository,
    TransactionTypeRepository,
    UserRepository,
)


@pytest.fixture
def session():
    engine = create_engine("sqlite://")
    Base.metadata.create_all(engine)
    with Session(engine) as s:
        yield s
    engine.dispose()


def _seed_lookups(session):
    income = TransactionType(name="income")
    expense = TransactionType(name="expense")
    food = TransactionCategory(name="food")
    salary = TransactionCategory(name="salary")
    session.add_all([income, expense, food, salary])
    session.commit()
    return income, expense, food, salary


def _add_transaction(session, user_id, ttype, category, amount, detail):
    repo = TransactionRepository(session)
    return repo.create_transaction(
        Transaction(
            user_id=user_id,
            amount=amount,
            detail=detail,
            transaction_type_id=ttype.id,
            transaction_category_id=category.id,
            transaction_type=ttype,
            transaction_category=category,
        )
    )


def test_get_all_books_empty(session):
    assert BookRepository(session).get_all_books() == []


def test_get_all_books_returns_stored(session):
    session.add_all([Book(title="Dune", author="Herbert", price=9.5), Book(title="Emma", author="Austen", price=4.0)])
    session.commit()
    books = BookRepository(session).get_all_books()
    assert sorted(b.title for b in books) == ["Dune", "Emma"]
    assert {b.author for b in books} == {"Herbert", "Austen"}


def test_type_by_name_found(session):
    income, _, _, _ = _seed_lookups(session)
    found = TransactionTypeRepository(session).get_transaction_type_by_name("income")
    assert found.id == income.id
    assert found.name == "income"


def test_type_by_name_missing(session):
    _seed_lookups(session)
    with pytest.raises(RecordNotFoundError):
        TransactionTypeRepository(session).get_transaction_type_by_name("gift")


def test_type_by_name_returns_lowest_id_on_duplicates(session):
    first = TransactionType(name="dup")
    second = TransactionType(name="dup")
    session.add_all([first, second])
    session.commit()
    found = TransactionTypeRepository(session).get_transaction_type_by_name("dup")
    assert found.id == min(first.id, second.id)


def test_category_by_name_found(session):
    _, _, food, _ = _seed_lookups(session)
    found = TransactionCategoryRepository(session).get_transaction_category_by_name("food")
    assert found.id == food.id
    assert found.name == "food"


def test_category_by_name_missing(session):
    _seed_lookups(session)
    with pytest.raises(RecordNotFoundError):
        TransactionCategoryRepository(session).get_transaction_category_by_name("travel")


def test_create_user_assigns_id_and_time(session):
    user = UserRepository(session).create_user(User(username="alice"))
    assert user.id is not None
    assert user.created_at is not None
    stored = session.scalars(select(User).where(User.id == user.id)).one()
    assert stored.username == "alice"


def test_create_user_failure_rolls_back(session):
    User.__table__.drop(session.get_bind())
    with pytest.raises(SQLAlchemyError):
        UserRepository(session).create_user(User(username="bob"))
    assert BookRepository(session).get_all_books() == []


def test_create_and_list_transaction(session):
    income, _, _, salary = _seed_lookups(session)
    created = _add_transaction(session, 7, income, salary, 1500.0, "march pay")
    assert created.id is not None
    listed = TransactionRepository(session).get_transactions(TransactionRequest())
    assert [t.id for t in listed] == [created.id]
    item = listed[0]
    assert item.transaction_type.name == "income"
    assert item.transaction_category.name == "salary"
    assert item.amount == 1500.0
    assert item.detail == "march pay"


def test_filter_by_user(session):
    income, expense, food, salary = _seed_lookups(session)
    a = _add_transaction(session, 1, income, salary, 10.0, "a")
    _add_transaction(session, 2, expense, food, 20.0, "b")
    c = _add_transaction(session, 1, expense, food, 30.0, "c")
    listed = TransactionRepository(session).get_transactions(TransactionRequest(user_id=1))
    assert sorted(t.id for t in listed) == sorted([a.id, c.id])
    assert all(t.user_id == 1 for t in listed)


def test_filter_by_user_zero_is_a_filter(session):
    income, _, _, salary = _seed_lookups(session)
    _add_transaction(session, 3, income, salary, 5.0, "x")
    listed = TransactionRepository(session).get_transactions(TransactionRequest(user_id=0))
    assert listed == []


def test_filter_by_type_name(session):
    income, expense, food, salary = _seed_lookups(session)
    _add_transaction(session, 1, income, salary, 10.0, "a")
    b = _add_transaction(session, 2, expense, food, 20.0, "b")
    listed = TransactionRepository(session).get_transactions(
        TransactionRequest(transaction_type="expense")
    )
    assert [t.id for t in listed] == [b.id]


def test_filter_by_user_and_type(session):
    income, expense, food, salary = _seed_lookups(session)
    _add_transaction(session, 1, income, salary, 10.0, "a")
    _add_transaction(session, 2, expense, food, 20.0, "b")
    c = _add_transaction(session, 1, expense, food, 30.0, "c")
    listed = TransactionRepository(session).get_transactions(
        TransactionRequest(user_id=1, transaction_type="expense")
    )
    assert [t.id for t in listed] == [c.id]


def test_filter_by_unknown_type_is_empty(session):
    income, _, _, salary = _seed_lookups(session)
    _add_transaction(session, 1, income, salary, 10.0, "a")
    listed = TransactionRepository(session).get_transactions(
        TransactionRequest(transaction_type="gift")
    )
    assert listed == []