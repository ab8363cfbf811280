# app/services/auth_service.py
import logging

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from app.models.user_models import User
from app.core.security import hash_password, verify_password, create_access_token
from app.schemas.auth_schemas import UserRegister, UserLogin, TokenResponse, UserOut

logger = logging.getLogger(__name__)


def _token_response(user: User, message: str) -> TokenResponse:
    access_token = create_access_token({"sub": str(user.id), "email": user.email})
    return TokenResponse(message=message, access_token=access_token, user=UserOut.model_validate(user))


async def register_user(db: AsyncSession, data: UserRegister) -> TokenResponse:
    existing = await db.execute(select(User.id).where(User.email == data.email))
    if existing.scalars().first():
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered")

    user = User(email=data.email, password_hash=hash_password(data.password), name=data.name)
    db.add(user)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered")
    await db.refresh(user)

    logger.info("User %s registered", user.id)
    return _token_response(user, "Registered successfully")


async def authenticate_user(db: AsyncSession, data: UserLogin) -> TokenResponse:
    result = await db.execute(select(User).where(User.email == data.email))
    user = result.scalars().first()
    if not user or not verify_password(data.password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials"
        )
    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="User account is inactive.")
    return _token_response(user, "Logged in successfully")
