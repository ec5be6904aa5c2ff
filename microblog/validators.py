"""Field rules for users and microposts.

Every rule runs on every check, so a caller gets all the problems at once.
Rules that need the database (email uniqueness) live in ``crud``.
"""
import re
from typing import Dict, List

from .models.microposts import MAX_CONTENT_LENGTH

NAME_MAX_LENGTH = 50
EMAIL_MAX_LENGTH = 255
PASSWORD_MIN_LENGTH = 6

# No underscores in domain labels, no empty labels, no dot right before '@'.
EMAIL_RE = re.compile(
    r'[\w+\-]+(\.[\w+\-]+)*@[a-z\d\-]+(\.[a-z\d\-]+)*\.[a-z]+',
    re.IGNORECASE | re.ASCII,
)

BLANK = "can't be blank"
INVALID = 'is invalid'
TAKEN = 'has already been taken'


def is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def valid_email(email: str) -> bool:
    return EMAIL_RE.fullmatch(email) is not None


def normalize_email(email):
    if isinstance(email, str):
        return email.strip().lower()
    return email


def _add(errors: Dict[str, List[str]], field: str, message: str):
    errors.setdefault(field, []).append(message)


def user_errors(user, new_record: bool = None) -> Dict[str, List[str]]:
    if new_record is None:
        new_record = user.id is None
    errors: Dict[str, List[str]] = {}

    if is_blank(user.name):
        _add(errors, 'name', BLANK)
    elif len(user.name) > NAME_MAX_LENGTH:
        _add(errors, 'name', f'is too long (maximum is {NAME_MAX_LENGTH} characters)')

    # checked as it will be stored
    email = normalize_email(user.email)
    if is_blank(email):
        _add(errors, 'email', BLANK)
    else:
        if len(email) > EMAIL_MAX_LENGTH:
            _add(errors, 'email', f'is too long (maximum is {EMAIL_MAX_LENGTH} characters)')
        if not valid_email(email):
            _add(errors, 'email', INVALID)

    # a password is only checked when one is being set
    if new_record or user.password is not None:
        if is_blank(user.password):
            _add(errors, 'password', BLANK)
        elif len(user.password) < PASSWORD_MIN_LENGTH:
            _add(errors, 'password', f'is too short (minimum is {PASSWORD_MIN_LENGTH} characters)')
        if is_blank(user.password_confirmation):
            _add(errors, 'password_confirmation', BLANK)
        elif user.password_confirmation != user.password:
            _add(errors, 'password_confirmation', "doesn't match Password")

    return errors


def micropost_errors(micropost) -> Dict[str, List[str]]:
    errors: Dict[str, List[str]] = {}
    if is_blank(micropost.content):
        _add(errors, 'content', BLANK)
    elif len(micropost.content) > MAX_CONTENT_LENGTH:
        _add(errors, 'content', f'is too long (maximum is {MAX_CONTENT_LENGTH} characters)')
    if micropost.user_id is None:
        _add(errors, 'user_id', BLANK)
    return errors
