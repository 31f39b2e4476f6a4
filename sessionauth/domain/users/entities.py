# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

# Storage widths for client metadata recorded on a session.
USER_AGENT_MAX_LENGTH = 512
CLIENT_IP_MAX_LENGTH = 64


@dataclass(slots=True, frozen=True)
class User:

    id: UUID
    email: str
    username: str
    password_hash: str
    created_at: datetime
    is_blocked: bool = False


@dataclass(slots=True, frozen=True)
class Session:
    """One login on one device, addressed by its current refresh token."""

    id: UUID
    user_id: UUID
    refresh_token: str
    created_at: datetime
    expires_at: datetime
    user_agent: str
    client_ip: str | None

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at <= now
