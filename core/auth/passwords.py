import base64
import hashlib

import bcrypt


def _prehash(password: str) -> bytes:
    # bcrypt rejects inputs over 72 bytes; a SHA-256 digest keeps every password at 44
    return base64.b64encode(hashlib.sha256(password.encode('utf-8')).digest())


def hash_password(password: str, rounds: int = 10) -> str:
    """Hash a password with bcrypt."""
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(_prehash(password), salt).decode('utf-8')


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its hash."""
    try:
        return bcrypt.checkpw(_prehash(password), password_hash.encode('utf-8'))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False
