# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from functools import wraps
from typing import Any

from flask import g, request

from sessionauth.application.use_cases.users.verify_user import VerifyUserUseCase
from sessionauth.shared.errors import AuthenticationError
from sessionauth.shared.logging import logger


def bearer_token() -> str:
    auth_header = request.headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        return auth_header[7:].strip()
    return ""


def require_auth(verify_user: VerifyUserUseCase) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Reject the request unless it carries a valid, unblocked access token.

    The resolved user id is stored on ``g.user_id`` for the view.
    """

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            token = bearer_token()
            if not token:
                logger.warning(f"No Authorization header on {request.method} {request.path}")
                raise AuthenticationError("missing_token")

            g.user_id = verify_user.execute(token)
            return func(*args, **kwargs)

        return wrapper

    return decorator


__all__ = ["bearer_token", "require_auth"]
