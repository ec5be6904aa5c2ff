from fastapi import APIRouter, Depends, HTTPException, Form, Response
from ..schemas.users import TokenOut, ActionOkOut
from ..crud import authenticate_user, sign_in, sign_out
from ..auth import access_token_for, set_remember_cookie, clear_remember_cookie
from ..models.users import User
from .deps import get_current_user

router = APIRouter()


@router.post('', response_model=TokenOut)
async def login(
    response: Response,
    username: str = Form(...),
    password: str = Form(...),
):
    # username carries the email so OAuth2 password-flow clients work unchanged
    user = await authenticate_user(username, password)
    if not user:
        raise HTTPException(status_code=401, detail='Invalid email/password combination')

    remember_token = await sign_in(user)
    set_remember_cookie(response, remember_token)
    return {'access_token': access_token_for(user), 'token_type': 'bearer', 'remember_token': remember_token}


@router.delete('', response_model=ActionOkOut)
async def logout(response: Response, current_user: User = Depends(get_current_user)):
    await sign_out(current_user)
    clear_remember_cookie(response)
    return {'ok': True}
