from __future__ import annotations

from functools import wraps
from typing import Any, Callable, TypeVar, cast

from flask import abort, current_app, jsonify, request
from sqlalchemy.exc import SQLAlchemyError

from extensions import db

F = TypeVar("F", bound=Callable[..., Any])


def db_failure(message: str) -> Callable[[F], F]:
    """Turn a database error inside the view into ``500 {"message": message}``."""

    def decorator(func: F) -> F:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any):
            try:
                return func(*args, **kwargs)
            except SQLAlchemyError as e:
                db.session.rollback()
                current_app.logger.exception("%s: %s", message, e)
                return jsonify({"message": message}), 500

        return cast(F, wrapper)

    return decorator


def json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def get_or_404(model, ident: str, label: str):
    row = db.session.get(model, ident)
    if row is None:
        abort(404, description=f"{label} not found")
    return row
