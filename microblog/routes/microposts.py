from fastapi import APIRouter, Depends, HTTPException
from ..schemas.microposts import MicropostIn, MicropostOut
from ..schemas.users import ActionOkOut
from ..crud import create_micropost, delete_micropost
from ..models.users import User
from .deps import get_current_user

router = APIRouter()


@router.post('', response_model=MicropostOut)
async def create(payload: MicropostIn, current_user: User = Depends(get_current_user)):
    return await create_micropost(current_user, payload.content)


@router.delete('/{micropost_id}', response_model=ActionOkOut)
async def destroy(micropost_id: int, current_user: User = Depends(get_current_user)):
    # someone else's post looks the same as a missing one
    if not await delete_micropost(micropost_id, current_user.id):
        raise HTTPException(404, 'Micropost not found')
    return {'ok': True}
