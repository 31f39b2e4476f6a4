# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .login_user import LoginResult, LoginUserUseCase
from .logout_session import LogoutAllSessionsUseCase, LogoutSessionUseCase
from .refresh_session import RefreshSessionUseCase, TokenPair
from .register_user import RegisterUserUseCase
from .verify_user import VerifyUserUseCase

__all__ = [
    "LoginResult",
    "LoginUserUseCase",
    "LogoutAllSessionsUseCase",
    "LogoutSessionUseCase",
    "RefreshSessionUseCase",
    "RegisterUserUseCase",
    "TokenPair",
    "VerifyUserUseCase",
]
