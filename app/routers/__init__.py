# app/routers/__init__.py
from fastapi import APIRouter
from .auth_router import router as auth_router
from .customers_router import router as customers_router

router = APIRouter(prefix="/api")

router.include_router(auth_router)
router.include_router(customers_router)
