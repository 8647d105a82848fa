from fastapi import APIRouter

from .v1 import router as v1_router

api_router = APIRouter()
# Endpoint paths are part of the public mobile-client contract, so v1 is mounted unprefixed.
api_router.include_router(v1_router)
