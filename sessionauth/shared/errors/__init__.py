# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .base import (
    AppError,
    AuthenticationError,
    ConflictError,
    NotFoundError,
    RepositoryError,
    SessionRotationConflictError,
    ValidationError,
)

__all__ = [
    "AppError",
    "AuthenticationError",
    "ConflictError",
    "NotFoundError",
    "RepositoryError",
    "SessionRotationConflictError",
    "ValidationError",
]
