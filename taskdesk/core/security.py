"""Password digest helpers."""

import hashlib
import hmac


def hash_password(password: str) -> str:
    """SHA-256 over the UTF-8 bytes, as lowercase hex."""
    return hashlib.sha256(password.encode("utf-8")).hexdigest()


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Compare a raw password against a stored hex digest."""
    if plain_password is None or not hashed_password:
        return False
    return hmac.compare_digest(hash_password(plain_password), hashed_password)
