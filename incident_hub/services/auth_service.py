from __future__ import annotations

import logging
from datetime import timedelta
from typing import Any, Dict, Optional

from pymongo.errors import DuplicateKeyError

from incident_hub.core.errors import AuthRequired, Conflict, store_errors
from incident_hub.core.security import hash_password, new_session_token, verify_password
from incident_hub.models.common import new_id, utcnow
from incident_hub.repositories.auth_repository import SessionRepository, UserRepository
from incident_hub.repositories.profile_repository import ProfileRepository
from incident_hub.services.profile_cache import ProfileCache

logger = logging.getLogger(__name__)


def _email_norm(email: str) -> str:
    return (email or "").lower().strip()


class AuthService:
    def __init__(self, db, cache: ProfileCache, session_ttl_hours: int = 24 * 14):
        self.users = UserRepository(db)
        self.sessions = SessionRepository(db)
        self.profiles = ProfileRepository(db)
        self.cache = cache
        self.session_ttl = timedelta(hours=session_ttl_hours)

    @store_errors("Could not create your account. Please try again.")
    async def register(self, email: str, password: str) -> Dict[str, Any]:
        email_norm = _email_norm(email)

        # prevent duplicates (works even without unique index)
        if await self.users.get_by_email(email_norm):
            raise Conflict("Email already exists")

        doc = {
            "_id": new_id(),
            "email": email_norm,
            "password_hash": hash_password(password),
            "created_at": utcnow(),
        }
        try:
            await self.users.insert(doc)
        except DuplicateKeyError:
            raise Conflict("Email already exists")

        logger.info("Registered principal %s", doc["_id"])
        return await self._open_session(doc["_id"])

    @store_errors("Sign in failed. Please try again.")
    async def login(self, email: str, password: str) -> Dict[str, Any]:
        user = await self.users.get_by_email(_email_norm(email))
        if not user or not verify_password(password, user.get("password_hash", "")):
            raise AuthRequired("Invalid credentials")
        return await self._open_session(user["_id"])

    async def _open_session(self, principal_id: str) -> Dict[str, Any]:
        now = utcnow()
        session = {
            "_id": new_session_token(),
            "principal_id": principal_id,
            "created_at": now,
            "expires_at": now + self.session_ttl,
        }
        await self.sessions.create(session)
        has_profile = await self.profiles.get(principal_id) is not None
        return {
            "principal_id": principal_id,
            "token": session["_id"],
            "expires_at": session["expires_at"],
            "has_profile": has_profile,
        }

    @store_errors("Sign out failed. Please try again.")
    async def logout(self, token: str, principal_id: str) -> None:
        await self.sessions.delete(token)
        self.cache.clear(principal_id)
        logger.info("Signed out principal %s", principal_id)

    @store_errors("Could not verify your session. Please try again.")
    async def principal_for_token(self, token: Optional[str]) -> Optional[str]:
        if not token:
            return None
        session = await self.sessions.get_active(token, utcnow())
        if not session:
            return None
        return session["principal_id"]
