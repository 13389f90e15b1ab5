"""
Security Utilities.

Credential checks for the two kinds of callers:

- Authors present the shared admin key. It is compared verbatim (in
  constant time) against the configured secret; it is never hashed.
- Readers present a proposal's password. It is bcrypt-hashed once at
  creation and every later check recomputes against the stored hash.

bcrypt is deliberately slow. Async code must use hash_password_async /
verify_password_async so the work runs on the I/O thread pool.
"""

import hmac

import bcrypt

from modules.backend.core.concurrency import run_blocking
from modules.backend.core.logging import get_logger

logger = get_logger(__name__)

DEFAULT_ROUNDS = 10

# bcrypt only looks at the first 72 bytes of a password
BCRYPT_MAX_PASSWORD_BYTES = 72


def verify_admin_key(candidate: str | None, secret: str) -> bool:
    """Constant-time equality between a caller-supplied key and the admin secret."""
    if candidate is None or not secret:
        return False
    return hmac.compare_digest(candidate.encode("utf-8"), secret.encode("utf-8"))


def hash_password(password: str, rounds: int = DEFAULT_ROUNDS) -> str:
    """Hash a password using bcrypt with the given cost factor."""
    password_bytes = password.encode("utf-8")
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password_bytes, salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a password against its hash.

    A malformed or empty stored hash, or a candidate bcrypt refuses,
    returns False exactly like a wrong password. Candidates longer than
    BCRYPT_MAX_PASSWORD_BYTES never match, whichever bcrypt release is
    installed; older ones would compare only the first 72 bytes.
    """
    if not isinstance(plain_password, str) or not hashed_password:
        return False
    password_bytes = plain_password.encode("utf-8")
    if len(password_bytes) > BCRYPT_MAX_PASSWORD_BYTES:
        return False
    try:
        return bcrypt.checkpw(
            password_bytes,
            hashed_password.encode("utf-8"),
        )
    except ValueError:
        logger.debug("Password check rejected input")
        return False


async def hash_password_async(password: str, rounds: int = DEFAULT_ROUNDS) -> str:
    """hash_password on the I/O thread pool."""
    return await run_blocking(hash_password, password, rounds)


async def verify_password_async(plain_password: str, hashed_password: str) -> bool:
    """verify_password on the I/O thread pool."""
    return await run_blocking(verify_password, plain_password, hashed_password)
