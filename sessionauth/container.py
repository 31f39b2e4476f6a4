# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from datetime import timedelta
from functools import cached_property

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from sessionauth.application.services.password_hashing import WerkzeugPasswordHasher
from sessionauth.application.use_cases.users import (
    LoginUserUseCase,
    LogoutAllSessionsUseCase,
    LogoutSessionUseCase,
    RefreshSessionUseCase,
    RegisterUserUseCase,
    VerifyUserUseCase,
)
from sessionauth.infrastructure.auth.jwt_signer import JwtTokenSigner
from sessionauth.infrastructure.repositories.users.sqlalchemy_auth_repository import (
    SqlAlchemyAuthRepository,
)
from sessionauth.interfaces.http.controllers.auth_controller import AuthController
from sessionauth.shared.config import AppConfig, load_config


class Container:
    def __init__(
        self,
        config: AppConfig | None = None,
        *,
        engine: Engine | None = None,
    ) -> None:
        self.config = config or load_config()
        self.engine = engine

    @cached_property
    def session_factory(self) -> Callable[[], Session] | None:
        # None selects the module-level SessionLocal bound to ENGINE.
        if self.engine is None:
            return None
        return sessionmaker(bind=self.engine, autoflush=False, expire_on_commit=False)

    @cached_property
    def session_ttl(self) -> timedelta:
        return timedelta(days=self.config.tokens.session_ttl_days)

    @cached_property
    def password_hasher(self) -> WerkzeugPasswordHasher:
        return WerkzeugPasswordHasher()

    @cached_property
    def token_signer(self) -> JwtTokenSigner:
        return JwtTokenSigner.from_config(self.config.tokens)

    @cached_property
    def auth_repository(self) -> SqlAlchemyAuthRepository:
        return SqlAlchemyAuthRepository(self.session_factory)

    @cached_property
    def register_user_use_case(self) -> RegisterUserUseCase:
        return RegisterUserUseCase(
            repository=self.auth_repository,
            password_hasher=self.password_hasher,
        )

    @cached_property
    def login_user_use_case(self) -> LoginUserUseCase:
        return LoginUserUseCase(
            repository=self.auth_repository,
            password_hasher=self.password_hasher,
            token_signer=self.token_signer,
            session_ttl=self.session_ttl,
        )

    @cached_property
    def refresh_session_use_case(self) -> RefreshSessionUseCase:
        return RefreshSessionUseCase(
            repository=self.auth_repository,
            token_signer=self.token_signer,
            session_ttl=self.session_ttl,
        )

    @cached_property
    def logout_session_use_case(self) -> LogoutSessionUseCase:
        return LogoutSessionUseCase(repository=self.auth_repository)

    @cached_property
    def logout_all_sessions_use_case(self) -> LogoutAllSessionsUseCase:
        return LogoutAllSessionsUseCase(repository=self.auth_repository)

    @cached_property
    def verify_user_use_case(self) -> VerifyUserUseCase:
        return VerifyUserUseCase(repository=self.auth_repository, token_signer=self.token_signer)

    @cached_property
    def auth_controller(self) -> AuthController:
        return AuthController(
            register_use_case=self.register_user_use_case,
            login_use_case=self.login_user_use_case,
            refresh_use_case=self.refresh_session_use_case,
            logout_use_case=self.logout_session_use_case,
            logout_all_use_case=self.logout_all_sessions_use_case,
            verify_use_case=self.verify_user_use_case,
            security=self.config.security,
            session_max_age=int(self.session_ttl.total_seconds()),
        )
