from fastapi import Depends, HTTPException, Request
from fastapi.security import OAuth2PasswordBearer
from ..auth import user_id_from_access_token, remember_token_from
from ..crud import get_user_by_id, find_user_by_remember_token
from ..models.users import User

oauth2_scheme = OAuth2PasswordBearer(tokenUrl='/api/sessions', auto_error=False)


async def get_current_user(request: Request, token: str | None = Depends(oauth2_scheme)) -> User:
    """Resolve the caller from a bearer token, falling back to the remember cookie."""
    if token:
        user_id = user_id_from_access_token(token)
        user = await get_user_by_id(user_id) if user_id is not None else None
        if not user:
            raise HTTPException(401, 'Invalid credentials', headers={'WWW-Authenticate': 'Bearer'})
        return user

    user = await find_user_by_remember_token(remember_token_from(request))
    if not user:
        raise HTTPException(401, 'Not signed in', headers={'WWW-Authenticate': 'Bearer'})
    return user


async def get_admin_user(current_user: User = Depends(get_current_user)) -> User:
    if not current_user.admin:
        raise HTTPException(403, 'Admin privileges required')
    return current_user
