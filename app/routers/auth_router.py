# app/routers/auth_router.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.schemas.auth_schemas import UserRegister, UserLogin, TokenResponse, MeResponse, UserOut
from app.services.auth_service import register_user, authenticate_user
from app.utils.get_user import get_current_user

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def register(data: UserRegister, db: AsyncSession = Depends(get_db)):
    return await register_user(db, data)


@router.post("/login", response_model=TokenResponse)
async def login(data: UserLogin, db: AsyncSession = Depends(get_db)):
    return await authenticate_user(db, data)


@router.get("/me", response_model=MeResponse)
async def me(current_user=Depends(get_current_user)):
    return MeResponse(message="Current user", user=UserOut.model_validate(current_user))
