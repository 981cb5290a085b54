from fastapi import APIRouter
from api.v1.routes.badges import router as badges_router
from api.v1.routes.events import router as events_router


router = APIRouter()
router.include_router(events_router)
router.include_router(badges_router)
