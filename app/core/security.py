# /app/core/security.py

"""
Password hashing and CSRF token helpers.

The CSRF tokens are stateless: a random nonce signed with the application's
secret key. `verify_token` only has to recompute the signature.
"""

import hashlib
import hmac
import secrets

from passlib.context import CryptContext

from .config import get_settings

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def get_password_hash(password: str) -> str:
    # bcrypt only looks at the first 72 bytes.
    password_bytes = password.encode("utf-8")
    if len(password_bytes) > 72:
        password = password_bytes[:72].decode("utf-8", errors="ignore")
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


# --- CSRF Tokens ---

def _sign(nonce: str) -> str:
    key = get_settings().secret_key.encode("utf-8")
    return hmac.new(key, nonce.encode("utf-8"), hashlib.sha256).hexdigest()


def generate_token() -> str:
    nonce = secrets.token_hex(16)
    return f"{nonce}.{_sign(nonce)}"


def verify_token(token: str) -> bool:
    if not token or "." not in token:
        return False
    nonce, signature = token.split(".", 1)
    return hmac.compare_digest(signature, _sign(nonce))
