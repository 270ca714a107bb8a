"""HTTP handlers that turn requests into use-case calls and JSON replies."""

from __future__ import annotations

import json
from typing import Any

from flask import Response, jsonify, request

from savegen.dto import (
    RequestError,
    TransactionCreateRequest,
    TransactionListResponse,
    TransactionRequest,
    TransactionResponse,
    UserCreateRequest,
    UserCreateResponse,
)
from savegen.usecase import BookUsecase, TransactionUsecase, UserUsecase

_BAD_REQUEST_MESSAGE = "Invalid request parameters"

Reply = tuple[Response, int]


def _envelope(status: int, code: str, messages: str, data: Any = None) -> Reply:
    return jsonify({"code": code, "messages": messages, "data": data}), status


def _bad_request() -> Reply:
    return _envelope(400, "BAD_REQUEST", _BAD_REQUEST_MESSAGE)


def _server_error(err: Exception) -> Reply:
    return _envelope(500, "INTERNAL_SERVER_ERROR", str(err))


def _json_body() -> Any:
    """Decode the request body as JSON whatever its declared content type."""
    raw = request.get_data(cache=True)
    try:
        data = json.loads(raw)
    except ValueError as err:
        raise RequestError("invalid JSON body") from err
    return {} if data is None else data


class Handler:
    """Request handlers backed by the application's use cases."""

    def __init__(
        self,
        book_usecase: BookUsecase,
        transaction_usecase: TransactionUsecase,
        user_usecase: UserUsecase,
    ) -> None:
        self.book_usecase = book_usecase
        self.transaction_usecase = transaction_usecase
        self.user_usecase = user_usecase

    def get_books(self) -> Reply:
        """List every book."""
        try:
            books = self.book_usecase.get_books()
        except Exception as err:
            return _server_error(err)
        return _envelope(200, "SUCCESS", "Success", [book.to_dict() for book in books])

    def get_transactions(self) -> Reply:
        """List transactions, filtered by the query string."""
        try:
            filters = TransactionRequest.from_query(request.args)
        except RequestError:
            return _bad_request()

        try:
            transactions = self.transaction_usecase.get_transactions(filters)
        except Exception as err:
            return _server_error(err)

        response = TransactionListResponse(
            code="SUCCESS",
            messages="Success",
            data=[TransactionResponse.from_entity(t) for t in transactions],
        )
        return jsonify(response.to_dict()), 200

    def create_transaction(self) -> Reply:
        """Record a transaction described by the JSON body."""
        try:
            payload = TransactionCreateRequest.from_json(_json_body())
        except RequestError:
            return _bad_request()

        try:
            transaction = self.transaction_usecase.create_transaction(payload)
        except Exception as err:
            return _server_error(err)

        return jsonify(TransactionResponse.from_entity(transaction).to_dict()), 200

    def create_user(self) -> Reply:
        """Register a user described by the JSON body."""
        try:
            payload = UserCreateRequest.from_json(_json_body())
        except RequestError:
            return _bad_request()

        try:
            user = self.user_usecase.create_user(payload)
        except Exception as err:
            return _server_error(err)

        return jsonify(UserCreateResponse.from_entity(user).to_dict()), 200