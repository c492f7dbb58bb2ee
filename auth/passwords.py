"""Password hashing and temporary password generation."""
import hashlib
import hmac
import secrets
import string

from config.auth_settings import TEMPORARY_PASSWORD_LENGTH

_ITERATIONS = 260_000
_ALPHABET = string.digits + string.ascii_uppercase + string.ascii_lowercase


def hash_password(password: str) -> str:
    """Hash password using PBKDF2-SHA256."""
    salt = secrets.token_hex(16)
    dk = hashlib.pbkdf2_hmac("sha256", password.encode(), salt.encode(), _ITERATIONS)
    return f"pbkdf2:sha256:{_ITERATIONS}${salt}${dk.hex()}"


def verify_password(password: str, password_hash: str | None) -> bool:
    """Verify password against a PBKDF2-SHA256 hash."""
    if not password_hash:
        return False
    try:
        prefix, salt, stored_hash = password_hash.split("$")
        iterations = int(prefix.split(":")[-1])
    except ValueError:
        return False
    dk = hashlib.pbkdf2_hmac("sha256", password.encode(), salt.encode(), iterations)
    return hmac.compare_digest(dk.hex(), stored_hash)


def generate_temporary_password(length: int = TEMPORARY_PASSWORD_LENGTH) -> str:
    """Generate a temporary password for new users."""
    return "".join(secrets.choice(_ALPHABET) for _ in range(length))
