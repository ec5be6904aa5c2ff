import os
import logging
from passlib.context import CryptContext

logger = logging.getLogger(__name__)

# argon2 for new digests; bcrypt digests still verify and get upgraded on sign-in
pwd_ctx = CryptContext(
    schemes=['argon2', 'bcrypt'],
    deprecated='auto',
    argon2__time_cost=int(os.getenv('ARGON2_TIME_COST', '2')),
    argon2__memory_cost=int(os.getenv('ARGON2_MEMORY_COST', str(64 * 1024))),
    argon2__parallelism=int(os.getenv('ARGON2_PARALLELISM', '2')),
)


def hash_password(password: str) -> str:
    return pwd_ctx.hash(password)


def verify_password(password: str, digest: str) -> bool:
    """Check a plaintext attempt against a stored digest.

    An unrecognised or corrupt digest counts as a mismatch rather than an
    error, so callers only ever see True or False.
    """
    if not password or not digest:
        return False
    try:
        return pwd_ctx.verify(password, digest)
    except (ValueError, TypeError) as e:
        logger.warning(f'Password digest could not be verified: {e}')
        return False


def dummy_verify():
    # burns the same time as a real check when there is no digest to check
    pwd_ctx.dummy_verify()


def password_needs_rehash(digest: str) -> bool:
    try:
        return pwd_ctx.needs_update(digest)
    except ValueError:
        return False
