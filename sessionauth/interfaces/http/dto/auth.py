from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel, Field


class RegisterRequestDTO(BaseModel):
    # Length and strength rules live in the domain; here only shape is checked.
    username: str = Field(max_length=256)
    email: str = Field(max_length=256)
    password: str


class LoginRequestDTO(BaseModel):
    login: str = Field(min_length=1, max_length=256)
    password: str = Field(min_length=1)


class LogoutRequestDTO(BaseModel):
    session_id: UUID


class RegisterResponseDTO(BaseModel):
    user_id: UUID


class LoginResponseDTO(BaseModel):
    user_id: UUID
    access_token: str
    session_id: UUID


class AccessTokenDTO(BaseModel):
    access_token: str


class CurrentUserDTO(BaseModel):
    user_id: UUID
