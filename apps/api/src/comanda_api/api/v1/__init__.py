from fastapi import APIRouter

from .endpoints import health, mail, notify

router = APIRouter()
router.include_router(health.router, tags=["Health"])
router.include_router(notify.router)
router.include_router(mail.router)
