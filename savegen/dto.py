"""Request and response shapes exchanged with HTTP clients."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1
_INT_PATTERN = re.compile(r"[+-]?[0-9]+")
_ZERO_TIME = "0001-01-01T00:00:00Z"


class RequestError(ValueError):
    """Raised when request data cannot be bound to a request object."""


def _format_time(value: datetime | None) -> str:
    if value is None:
        return _ZERO_TIME
    text = value.isoformat()
    if value.utcoffset() == timedelta(0):
        text = text.removesuffix("+00:00") + "Z"
    return text


def _check_int64(key: str, value: int) -> int:
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise RequestError(f"{key}: value out of range")
    return value


def _query_int(args: Mapping[str, Any], key: str) -> int | None:
    raw = args.get(key)
    if raw is None:
        return None
    if raw == "":
        return 0
    if not _INT_PATTERN.fullmatch(raw):
        raise RequestError(f"{key}: invalid integer {raw!r}")
    return _check_int64(key, int(raw))


def _query_str(args: Mapping[str, Any], key: str) -> str | None:
    raw = args.get(key)
    return None if raw is None else str(raw)


def _json_object(data: Any) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise RequestError("request body must be a JSON object")
    return data


def _json_int(data: Mapping[str, Any], key: str) -> int | None:
    value = data.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise RequestError(f"{key}: expected an integer")
    return _check_int64(key, value)


def _json_float(data: Mapping[str, Any], key: str) -> float | None:
    value = data.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise RequestError(f"{key}: expected a number")
    return float(value)


def _json_str(data: Mapping[str, Any], key: str) -> str | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise RequestError(f"{key}: expected a string")
    return value


@dataclass
class TransactionRequest:
    """Filters for listing transactions; None means no filter."""

    user_id: int | None = None
    transaction_type: str | None = None

    @classmethod
    def from_query(cls, args: Mapping[str, Any]) -> TransactionRequest:
        """Bind query-string parameters."""
        return cls(
            user_id=_query_int(args, "user_id"),
            transaction_type=_query_str(args, "transaction_type"),
        )


@dataclass
class TransactionCreateRequest:
    """Body of a request that records a new transaction."""

    user_id: int | None = None
    amount: float | None = None
    detail: str | None = None
    transaction_type: str | None = None
    transaction_category: str | None = None

    @classmethod
    def from_json(cls, data: Any) -> TransactionCreateRequest:
        """Bind a decoded JSON body."""
        body = _json_object(data)
        return cls(
            user_id=_json_int(body, "user_id"),
            amount=_json_float(body, "amount"),
            detail=_json_str(body, "detail"),
            transaction_type=_json_str(body, "transaction_type"),
            transaction_category=_json_str(body, "transaction_category"),
        )


@dataclass
class TransactionResponse:
    """A transaction as shown to clients, with type and category by name."""

    id: int = 0
    user_id: int = 0
    amount: float = 0.0
    transaction_type: str = ""
    transaction_category: str = ""
    detail: str = ""
    created_at: datetime | None = None

    @classmethod
    def from_entity(cls, transaction: Any) -> TransactionResponse:
        """Build a response from a stored transaction."""
        ttype = transaction.transaction_type
        category = transaction.transaction_category
        return cls(
            id=transaction.id or 0,
            user_id=transaction.user_id or 0,
            amount=transaction.amount or 0.0,
            transaction_type=ttype.name if ttype is not None else "",
            transaction_category=category.name if category is not None else "",
            detail=transaction.detail or "",
            created_at=transaction.created_at,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "amount": self.amount,
            "transaction_type": self.transaction_type,
            "transaction_category": self.transaction_category,
            "detail": self.detail,
            "created_at": _format_time(self.created_at),
        }


@dataclass
class TransactionListResponse:
    """Envelope for a list of transactions."""

    code: str
    messages: str
    data: list[TransactionResponse] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        # An empty result is sent as null, not as an empty array.
        return {
            "code": self.code,
            "messages": self.messages,
            "data": [item.to_dict() for item in self.data] if self.data else None,
        }


@dataclass
class UserCreateRequest:
    """Body of a request that registers a user."""

    username: str = ""

    @classmethod
    def from_json(cls, data: Any) -> UserCreateRequest:
        """Bind a decoded JSON body."""
        body = _json_object(data)
        return cls(username=_json_str(body, "username") or "")


@dataclass
class UserCreateResponse:
    """A newly created user as shown to clients."""

    id: int = 0
    username: str = ""
    created_at: datetime | None = None

    @classmethod
    def from_entity(cls, user: Any) -> UserCreateResponse:
        return cls(id=user.id or 0, username=user.username or "", created_at=user.created_at)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "username": self.username,
            "created_at": _format_time(self.created_at),
        }