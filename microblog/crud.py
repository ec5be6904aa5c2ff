import asyncio
import logging
from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy import select, delete, func
from sqlalchemy.exc import IntegrityError

from .models import AsyncSessionLocal
from .models.users import User
from .models.microposts import Micropost
from .auth import generate_remember_token, hash_token
from .security import hash_password, password_needs_rehash, dummy_verify
from .errors import ValidationError, ConstraintError
from . import validators
from .validators import normalize_email

logger = logging.getLogger(__name__)

USER_EDITABLE_FIELDS = ('name', 'email', 'password', 'password_confirmation')


async def _in_executor(func, *args):
    """Run blocking password hashing off the event loop"""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, func, *args)


# users

async def _email_taken(session, user) -> bool:
    if validators.is_blank(user.email):
        return False
    q = select(User.id).where(func.lower(User.email) == normalize_email(user.email))
    if user.id is not None:
        q = q.where(User.id != user.id)
    res = await session.execute(q.limit(1))
    return res.scalar() is not None


async def _user_errors(session, user) -> Dict[str, List[str]]:
    errors = validators.user_errors(user)
    if await _email_taken(session, user):
        errors.setdefault('email', []).append(validators.TAKEN)
    return errors


async def user_errors(user) -> Dict[str, List[str]]:
    """All rule violations for ``user`` as it stands, including email uniqueness."""
    async with AsyncSessionLocal() as session:
        return await _user_errors(session, user)


async def user_is_valid(user) -> bool:
    return not await user_errors(user)


async def save_user(user: User) -> User:
    """Validate and write ``user``, inserting or updating as needed.

    The email is normalized first; a new password is hashed and then
    dropped from the instance; a new record gets its remember token.
    Raises ValidationError (nothing written) or ConstraintError when the
    database itself refuses the row.
    """
    user.email = normalize_email(user.email)
    new_record = user.id is None
    async with AsyncSessionLocal() as session:
        errors = await _user_errors(session, user)
        if errors:
            raise ValidationError(errors)

        if user.password is not None:
            user.password_digest = await _in_executor(hash_password, user.password)
        if new_record:
            user.remember_token = hash_token(generate_remember_token())

        session.add(user)
        try:
            await session.commit()
        except IntegrityError as e:
            await session.rollback()
            logger.warning(f'Unique constraint rejected user email {user.email!r}')
            if not new_record:
                await session.refresh(user)
            raise ConstraintError({'email': [validators.TAKEN]}) from e
        await session.refresh(user)

    user.password = user.password_confirmation = None
    if new_record:
        logger.info(f'Created user {user.id}')
    return user


async def create_user(name: str, email: str, password: str, password_confirmation: str) -> User:
    user = User(name=name, email=email)
    user.password = password
    user.password_confirmation = password_confirmation
    return await save_user(user)


async def update_user(user: User, **changes) -> User:
    unknown = set(changes) - set(USER_EDITABLE_FIELDS)
    if unknown:
        raise ValueError(f'Cannot update fields: {", ".join(sorted(unknown))}')
    for field, value in changes.items():
        setattr(user, field, value)
    return await save_user(user)


async def find_user_by(**criteria) -> Optional[User]:
    q = select(User)
    for field, value in criteria.items():
        column = getattr(User, field)
        if field == 'email':
            q = q.where(func.lower(column) == normalize_email(value))
        else:
            q = q.where(column == value)
    async with AsyncSessionLocal() as session:
        res = await session.execute(q)
        return res.scalars().first()


async def get_user_by_id(user_id: int) -> Optional[User]:
    async with AsyncSessionLocal() as session:
        q = await session.execute(select(User).where(User.id == user_id))
        return q.scalars().first()


async def reload_user(user: User) -> Optional[User]:
    return await get_user_by_id(user.id)


async def list_users(page: int = 1, per_page: int = 30) -> List[User]:
    page = max(page, 1)
    async with AsyncSessionLocal() as session:
        q = select(User).order_by(User.id.asc()).offset((page - 1) * per_page).limit(per_page)
        res = await session.execute(q)
        return res.scalars().all()


async def toggle_admin(user: User) -> User:
    """Flip the admin flag and persist it; no other rule is re-checked."""
    if user.id is None:
        raise ValueError('User must be saved before changing admin')
    async with AsyncSessionLocal() as session:
        user.admin = not user.admin
        session.add(user)
        await session.commit()
        return user


async def delete_user(user: User) -> bool:
    # microposts go with it through the ON DELETE CASCADE foreign key
    async with AsyncSessionLocal() as session:
        async with session.begin():
            res = await session.execute(delete(User).where(User.id == user.id))
            deleted = res.rowcount > 0
    if deleted:
        logger.info(f'Deleted user {user.id}')
    return deleted


# authentication

async def authenticate_user(email: str, password: str) -> Optional[User]:
    """Return the user for a correct email/password pair, None otherwise."""
    user = await find_user_by(email=email)
    if user is None:
        await _in_executor(dummy_verify)
        return None
    if not await _in_executor(user.authenticate, password):
        return None
    if password_needs_rehash(user.password_digest):
        async with AsyncSessionLocal() as session:
            user.password_digest = await _in_executor(hash_password, password)
            session.add(user)
            await session.commit()
        logger.info(f'Upgraded password digest for user {user.id}')
    return user


async def _rotate_remember_token(user: User) -> str:
    token = generate_remember_token()
    async with AsyncSessionLocal() as session:
        user.remember_token = hash_token(token)
        session.add(user)
        await session.commit()
    return token


async def sign_in(user: User) -> str:
    """Issue a fresh remember token for ``user`` and return it unhashed."""
    token = await _rotate_remember_token(user)
    logger.info(f'User {user.id} signed in')
    return token


async def sign_out(user: User):
    await _rotate_remember_token(user)
    logger.info(f'User {user.id} signed out')


async def find_user_by_remember_token(token: str) -> Optional[User]:
    if not token:
        return None
    return await find_user_by(remember_token=hash_token(token))


# microposts

def _microposts_for(user_id: int):
    return (
        select(Micropost)
        .where(Micropost.user_id == user_id)
        .order_by(Micropost.created_at.desc(), Micropost.id.desc())
    )


async def create_micropost(user: User, content: str, created_at: datetime = None) -> Micropost:
    fields = {'content': content, 'user_id': user.id}
    if created_at is not None:
        fields['created_at'] = created_at
    post = Micropost(**fields)
    errors = validators.micropost_errors(post)
    if errors:
        raise ValidationError(errors)
    async with AsyncSessionLocal() as session:
        session.add(post)
        try:
            await session.commit()
        except IntegrityError as e:
            await session.rollback()
            raise ConstraintError({'user_id': ['does not exist']}) from e
        await session.refresh(post)
        return post


async def get_micropost(micropost_id: int) -> Optional[Micropost]:
    async with AsyncSessionLocal() as session:
        q = await session.execute(select(Micropost).where(Micropost.id == micropost_id))
        return q.scalars().first()


async def micropost_exists(micropost_id: int) -> bool:
    async with AsyncSessionLocal() as session:
        q = await session.execute(select(Micropost.id).where(Micropost.id == micropost_id))
        return q.scalar() is not None


async def list_microposts(user: User) -> List[Micropost]:
    async with AsyncSessionLocal() as session:
        res = await session.execute(_microposts_for(user.id))
        return res.scalars().all()


async def delete_micropost(micropost_id: int, user_id: int) -> bool:
    async with AsyncSessionLocal() as session:
        async with session.begin():
            res = await session.execute(
                delete(Micropost).where(Micropost.id == micropost_id, Micropost.user_id == user_id)
            )
            return res.rowcount > 0


async def feed(user: User) -> List[Micropost]:
    """Posts ``user`` gets to see, newest first.

    Only the user's own posts for now; there is no following yet.
    """
    async with AsyncSessionLocal() as session:
        res = await session.execute(_microposts_for(user.id))
        return res.scalars().all()
