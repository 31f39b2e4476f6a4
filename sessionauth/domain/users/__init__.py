# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .entities import Session, User
from .repositories import AuthRepository, PasswordHasher, TokenSigner

__all__ = ["AuthRepository", "PasswordHasher", "Session", "TokenSigner", "User"]
