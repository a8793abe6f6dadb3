# incident_hub/core/security.py
import secrets

from passlib.context import CryptContext

pwd = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
)


def _bcrypt_bytes(password) -> bytes:
    # bcrypt hard limit: 72 BYTES
    if isinstance(password, str):
        password = password.encode("utf-8")
    return password[:72]


def hash_password(password: str) -> str:
    return pwd.hash(_bcrypt_bytes(password))


def verify_password(password: str, hashed: str) -> bool:
    if not hashed:
        return False
    return pwd.verify(_bcrypt_bytes(password), hashed)


def new_session_token() -> str:
    return secrets.token_urlsafe(32)


def bearer_token(authorization: str | None) -> str | None:
    """Pull the token out of an `Authorization: Bearer <token>` header."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()
