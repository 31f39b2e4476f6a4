# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from http import HTTPStatus
from typing import Any


@dataclass(slots=True)
class AppError(Exception):
    code: str
    status: HTTPStatus
    context: Mapping[str, Any] | None = None

    def __post_init__(self) -> None:
        Exception.__init__(self, self.code)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.code}
        if self.context:
            payload["context"] = dict(self.context)
        return payload


class ValidationError(AppError):
    def __init__(
        self,
        code: str = "validation_error",
        *,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(
            code=code,
            status=HTTPStatus.UNPROCESSABLE_ENTITY,
            context=context,
        )


class AuthenticationError(AppError):
    """Any failed credential, token, session or blocked-user check.

    ``reason`` stays on the instance for logs; the payload is always the
    same ``unauthorized`` shape so callers cannot tell the checks apart.
    """

    def __init__(self, reason: str = "unauthorized") -> None:
        super().__init__(code="unauthorized", status=HTTPStatus.UNAUTHORIZED)
        self.reason = reason


class ConflictError(AppError):
    def __init__(self, entity: str = "user") -> None:
        super().__init__(
            code="conflict",
            status=HTTPStatus.CONFLICT,
            context={"entity": entity},
        )


class NotFoundError(AppError):
    def __init__(self, entity: str) -> None:
        super().__init__(
            code="not_found",
            status=HTTPStatus.NOT_FOUND,
            context={"entity": entity},
        )


class RepositoryError(AppError):
    def __init__(self, operation: str | None = None) -> None:
        super().__init__(code="repository_error", status=HTTPStatus.INTERNAL_SERVER_ERROR)
        self.operation = operation


class SessionRotationConflictError(RepositoryError):
    def __init__(self) -> None:
        super().__init__(operation="refresh_session")
