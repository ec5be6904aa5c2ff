from fastapi import APIRouter
from .users import router as users_router
from .sessions import router as sessions_router
from .microposts import router as microposts_router
from .feed import router as feed_router

router = APIRouter()
router.include_router(users_router, prefix='/users', tags=['users'])
router.include_router(sessions_router, prefix='/sessions', tags=['sessions'])
router.include_router(microposts_router, prefix='/microposts', tags=['microposts'])
router.include_router(feed_router, prefix='/feed', tags=['feed'])
