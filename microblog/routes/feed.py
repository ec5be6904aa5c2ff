from typing import List
from fastapi import APIRouter, Depends
from ..schemas.microposts import MicropostOut
from ..crud import feed as build_feed
from ..models.users import User
from .deps import get_current_user

router = APIRouter()


@router.get('', response_model=List[MicropostOut])
async def feed(current_user: User = Depends(get_current_user)):
    return await build_feed(current_user)
