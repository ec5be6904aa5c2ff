from typing import List
from fastapi import APIRouter, Depends, HTTPException, Query
from ..schemas.users import SignupIn, UserUpdateIn, UserOut, ActionOkOut, ValidationErrorOut
from ..schemas.microposts import MicropostOut
from ..crud import (
    create_user,
    get_user_by_id,
    list_users,
    update_user,
    delete_user,
    list_microposts,
)
from ..models.users import User
from .deps import get_current_user, get_admin_user

router = APIRouter()


@router.post('', response_model=UserOut, responses={422: {'model': ValidationErrorOut}})
async def signup(payload: SignupIn):
    user = await create_user(
        payload.name,
        payload.email,
        payload.password,
        payload.password_confirmation,
    )
    return user


@router.get('', response_model=List[UserOut])
async def index(
    page: int = Query(1, ge=1),
    per_page: int = Query(30, ge=1, le=100),
    current_user: User = Depends(get_current_user),
):
    return await list_users(page=page, per_page=per_page)


@router.get('/{user_id}', response_model=UserOut)
async def show(user_id: int):
    user = await get_user_by_id(user_id)
    if not user:
        raise HTTPException(404, 'User not found')
    return user


@router.get('/{user_id}/microposts', response_model=List[MicropostOut])
async def microposts(user_id: int):
    user = await get_user_by_id(user_id)
    if not user:
        raise HTTPException(404, 'User not found')
    return await list_microposts(user)


@router.patch('/{user_id}', response_model=UserOut, responses={422: {'model': ValidationErrorOut}})
async def update(
    user_id: int,
    payload: UserUpdateIn,
    current_user: User = Depends(get_current_user),
):
    if current_user.id != user_id:
        raise HTTPException(403, 'You can only edit your own profile')
    changes = payload.model_dump(exclude_none=True)
    return await update_user(current_user, **changes)


@router.delete('/{user_id}', response_model=ActionOkOut)
async def destroy(user_id: int, admin: User = Depends(get_admin_user)):
    if admin.id == user_id:
        raise HTTPException(403, 'Admins cannot delete themselves')
    user = await get_user_by_id(user_id)
    if not user:
        raise HTTPException(404, 'User not found')
    await delete_user(user)
    return {'ok': True, 'message': 'User deleted'}
