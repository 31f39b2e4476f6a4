# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, Response, g, jsonify, request
from pydantic import ValidationError

from sessionauth.application.use_cases.users import (
    LoginUserUseCase,
    LogoutAllSessionsUseCase,
    LogoutSessionUseCase,
    RefreshSessionUseCase,
    RegisterUserUseCase,
    VerifyUserUseCase,
)
from sessionauth.interfaces.http.auth_guard import require_auth
from sessionauth.interfaces.http.dto.auth import (
    AccessTokenDTO,
    CurrentUserDTO,
    LoginRequestDTO,
    LoginResponseDTO,
    LogoutRequestDTO,
    RegisterRequestDTO,
    RegisterResponseDTO,
)
from sessionauth.shared.config import SecurityConfig
from sessionauth.shared.errors import AuthenticationError
from sessionauth.shared.errors.validation import raise_validation_error
from sessionauth.shared.logging import logger
from sessionauth.shared.middleware.request_logger import get_client_ip


class AuthController:
    def __init__(
        self,
        *,
        register_use_case: RegisterUserUseCase,
        login_use_case: LoginUserUseCase,
        refresh_use_case: RefreshSessionUseCase,
        logout_use_case: LogoutSessionUseCase,
        logout_all_use_case: LogoutAllSessionsUseCase,
        verify_use_case: VerifyUserUseCase,
        security: SecurityConfig,
        session_max_age: int,
    ) -> None:
        self._register_use_case = register_use_case
        self._login_use_case = login_use_case
        self._refresh_use_case = refresh_use_case
        self._logout_use_case = logout_use_case
        self._logout_all_use_case = logout_all_use_case
        self._verify_use_case = verify_use_case
        self._security = security
        self._session_max_age = session_max_age

    def _set_refresh_cookie(self, response: Response, refresh_token: str) -> None:
        response.set_cookie(
            self._security.refresh_cookie_name,
            refresh_token,
            httponly=True,
            samesite=self._security.cookie_samesite,
            secure=self._security.cookie_secure,
            max_age=self._session_max_age,
            path=self._security.refresh_cookie_path,
        )

    def _clear_refresh_cookie(self, response: Response) -> None:
        response.delete_cookie(
            self._security.refresh_cookie_name,
            path=self._security.refresh_cookie_path,
        )

    def register(self) -> tuple[Response, int]:
        try:
            dto = RegisterRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        user_id = self._register_use_case.execute(dto.username, dto.email, dto.password)

        payload = RegisterResponseDTO(user_id=user_id).model_dump(mode="json")
        return jsonify(payload), HTTPStatus.CREATED

    def login(self) -> tuple[Response, int]:
        try:
            dto = LoginRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        result = self._login_use_case.execute(
            dto.login,
            dto.password,
            request.headers.get("User-Agent", ""),
            get_client_ip(),
        )

        payload = LoginResponseDTO(
            user_id=result.user_id,
            access_token=result.access_token,
            session_id=result.session_id,
        ).model_dump(mode="json")
        response = jsonify(payload)
        self._set_refresh_cookie(response, result.refresh_token)
        return response, HTTPStatus.OK

    def refresh(self) -> tuple[Response, int]:
        refresh_token = request.cookies.get(self._security.refresh_cookie_name, "")
        if not refresh_token:
            raise AuthenticationError("missing_refresh_token")

        pair = self._refresh_use_case.execute(refresh_token)

        response = jsonify(AccessTokenDTO(access_token=pair.access_token).model_dump())
        self._set_refresh_cookie(response, pair.refresh_token)
        return response, HTTPStatus.OK

    def logout(self) -> tuple[Response, int]:
        try:
            dto = LogoutRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        self._logout_use_case.execute(g.user_id, dto.session_id)

        # The revoked session may belong to another device, so the cookie is left alone.
        return Response(status=HTTPStatus.NO_CONTENT), HTTPStatus.NO_CONTENT

    def logout_all(self) -> tuple[Response, int]:
        self._logout_all_use_case.execute(g.user_id)

        response = Response(status=HTTPStatus.NO_CONTENT)
        self._clear_refresh_cookie(response)
        logger.info(f"auth.logout_all: cleared cookie for user_id={g.user_id}")
        return response, HTTPStatus.NO_CONTENT

    def me(self) -> tuple[Response, int]:
        return jsonify(CurrentUserDTO(user_id=g.user_id).model_dump(mode="json")), HTTPStatus.OK

    def as_blueprint(self) -> Blueprint:
        guard = require_auth(self._verify_use_case)
        bp = Blueprint("auth", __name__, url_prefix="/api/v1/auth")
        bp.add_url_rule("/register", view_func=self.register, methods=["POST"])
        bp.add_url_rule("/login", view_func=self.login, methods=["POST"])
        bp.add_url_rule("/refresh", view_func=self.refresh, methods=["POST"])
        bp.add_url_rule("/logout", view_func=guard(self.logout), methods=["POST"])
        bp.add_url_rule("/logout-all", view_func=guard(self.logout_all), methods=["POST"])
        bp.add_url_rule("/me", view_func=guard(self.me), methods=["GET"])
        return bp
