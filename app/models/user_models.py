import uuid
from sqlalchemy import Column, Integer, String, Boolean, DateTime, Uuid
from app.core.db import Base
from app.models.customer_models import utcnow


class User(Base):
    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String, nullable=False)
    name = Column(String(100), nullable=True)
    gender = Column(String(10), nullable=True)
    customer_limit = Column(Integer, nullable=False, default=50)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)
