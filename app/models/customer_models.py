import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, String, Text, Boolean, Date, DateTime, Index, UniqueConstraint, Uuid, text
from app.core.db import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Customer(Base):
    __tablename__ = "customers"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(100), nullable=False, index=True)
    email = Column(String(255), nullable=True, index=True)
    phone = Column(String(20), nullable=True, index=True)
    id_number = Column(String(20), nullable=True)
    gender = Column(String(10), nullable=True)
    birthday = Column(Date, nullable=True)
    zodiac_sign = Column(String(20), nullable=True)
    interests = Column(Text, nullable=True)
    is_married = Column(Boolean, nullable=True)
    has_children = Column(Boolean, nullable=True)
    customer_level = Column(String(1), nullable=False, default="C", index=True)
    customer_source = Column(String(100), nullable=True)
    company = Column(String(200), nullable=True, index=True)
    position = Column(String(100), nullable=True)
    address = Column(Text, nullable=True)
    city = Column(String(50), nullable=True)
    country = Column(String(50), nullable=True)
    website = Column(String(500), nullable=True)
    notes = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default="active", index=True)
    priority = Column(String(10), nullable=False, default="normal")
    assigned_to = Column(Uuid, nullable=True, index=True)
    last_contact_date = Column(DateTime(timezone=True), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    # Uniqueness only holds among active rows, soft-deleted ones may share values.
    __table_args__ = (
        Index(
            "uq_customers_email_active", "email", unique=True,
            postgresql_where=text("is_active"), sqlite_where=text("is_active = 1"),
        ),
        Index(
            "uq_customers_id_number_active", "id_number", unique=True,
            postgresql_where=text("is_active"), sqlite_where=text("is_active = 1"),
        ),
    )


class CustomerRelationship(Base):
    __tablename__ = "customer_relationships"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    # No FK: an edge may outlive (or predate) the customer rows it points at.
    customer_id = Column(Uuid, nullable=False, index=True)
    related_customer_id = Column(Uuid, nullable=False, index=True)
    relationship_type = Column(String(50), nullable=False)
    notes = Column(String(500), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        UniqueConstraint("customer_id", "related_customer_id", name="uq_customer_relationships_pair"),
    )
