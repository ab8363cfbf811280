# app/services/customer_service.py
import asyncio
import logging
import math
from typing import Any, Dict, Optional
from uuid import UUID

from sqlalchemy import func, or_, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import sessionmaker

from app.core.exceptions import CRMError, ConflictError, NotFoundError, storage_failure
from app.models.customer_models import Customer, utcnow
from app.schemas.customer_schemas import (
    CustomerCreate,
    CustomerDetailResponse,
    CustomerListResponse,
    CustomerOut,
    CustomerResponse,
    MessageResponse,
    Pagination,
)
from app.services import relationship_service

logger = logging.getLogger(__name__)

DUPLICATE_EMAIL = "Customer with this email already exists"
DUPLICATE_ID_NUMBER = "Customer with this ID number already exists"
DUPLICATE_CUSTOMER = "Duplicate customer data, check email or ID number"

# Never written through the update path.
IMMUTABLE_FIELDS = {"id", "assigned_to", "created_at", "updated_at", "is_active"}


def _is_active(customer_id: UUID):
    return (Customer.id == customer_id) & (Customer.is_active == True)


# --------------------------
# Helpers: one short-lived session per read so reads can run concurrently
# --------------------------
async def _first(store: sessionmaker, stmt):
    async with store() as db:
        result = await db.execute(stmt)
        return result.scalars().first()


async def _all(store: sessionmaker, stmt):
    async with store() as db:
        result = await db.execute(stmt)
        return result.scalars().all()


async def _scalar(store: sessionmaker, stmt):
    async with store() as db:
        result = await db.execute(stmt)
        return result.scalar()


async def _active_holder(store: sessionmaker, column, value) -> Optional[UUID]:
    if value is None:
        return None
    return await _first(
        store,
        select(Customer.id).where(column == value, Customer.is_active == True).limit(1),
    )


async def ensure_unique(store: sessionmaker, email: Optional[str] = None, id_number: Optional[str] = None) -> None:
    """
    Raise ConflictError if an active customer already holds the email or ID number.

    Both lookups run concurrently; an email collision is reported first.
    """
    email_holder, id_number_holder = await asyncio.gather(
        _active_holder(store, Customer.email, email),
        _active_holder(store, Customer.id_number, id_number),
    )
    if email_holder is not None:
        raise ConflictError(DUPLICATE_EMAIL)
    if id_number_holder is not None:
        raise ConflictError(DUPLICATE_ID_NUMBER)


# --------------------------
# LIST / SEARCH CUSTOMERS
# --------------------------
async def list_customers(
    store: sessionmaker,
    page: int = 1,
    limit: int = 10,
    search: Optional[str] = None,
    status: Optional[str] = None,
    customer_level: Optional[str] = None,
) -> CustomerListResponse:
    filters = [Customer.is_active == True]

    term = search.strip() if search else ""
    if term:
        filters.append(
            or_(
                Customer.name.contains(term, autoescape=True),
                Customer.email.contains(term, autoescape=True),
                Customer.phone.contains(term, autoescape=True),
                Customer.company.contains(term, autoescape=True),
            )
        )
    if status:
        filters.append(Customer.status == status)
    if customer_level:
        filters.append(Customer.customer_level == customer_level)

    page_stmt = (
        select(Customer)
        .where(*filters)
        .order_by(Customer.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    count_stmt = select(func.count(Customer.id)).where(*filters)

    try:
        customers, total = await asyncio.gather(_all(store, page_stmt), _scalar(store, count_stmt))
    except Exception as e:
        raise storage_failure(e, "list customers", logger) from e

    total = total or 0
    return CustomerListResponse(
        message="Customers retrieved successfully",
        customers=[CustomerOut.model_validate(c) for c in customers],
        pagination=Pagination(
            page=page,
            limit=limit,
            total=total,
            total_pages=math.ceil(total / limit),
        ),
    )


# --------------------------
# GET SINGLE CUSTOMER
# --------------------------
async def get_customer(store: sessionmaker, customer_id: UUID) -> CustomerDetailResponse:
    try:
        customer, relationships = await asyncio.gather(
            _first(store, select(Customer).where(_is_active(customer_id))),
            relationship_service.list_for_customer(store, customer_id),
        )
    except Exception as e:
        raise storage_failure(e, "fetch customer", logger) from e

    if not customer:
        raise NotFoundError("Customer not found")

    return CustomerDetailResponse(
        message="Customer retrieved successfully",
        customer=CustomerOut.model_validate(customer),
        relationships=relationships,
    )


# --------------------------
# CREATE CUSTOMER
# --------------------------
async def create_customer(store: sessionmaker, data: CustomerCreate, user_id: UUID) -> CustomerResponse:
    try:
        await ensure_unique(store, email=data.email, id_number=data.id_number)
    except CRMError:
        raise
    except Exception as e:
        raise storage_failure(e, "check customer uniqueness", logger, DUPLICATE_CUSTOMER) from e

    async with store() as db:
        try:
            customer_dict = data.model_dump()
            customer_dict["assigned_to"] = user_id
            customer_dict["updated_at"] = utcnow()
            customer = Customer(**customer_dict)
            db.add(customer)
            await db.commit()
            await db.refresh(customer)
        except Exception as e:
            await db.rollback()
            raise storage_failure(e, "create customer", logger, DUPLICATE_CUSTOMER) from e

    logger.info("Customer %s created by %s", customer.id, user_id)
    return CustomerResponse(
        message="Customer created successfully",
        customer=CustomerOut.model_validate(customer),
    )


# --------------------------
# UPDATE CUSTOMER
# --------------------------
async def update_customer(store: sessionmaker, customer_id: UUID, data: Dict[str, Any]) -> CustomerResponse:
    patch = {key: value for key, value in data.items() if key not in IMMUTABLE_FIELDS}

    try:
        current = await _first(store, select(Customer).where(_is_active(customer_id)))
        if not current:
            raise NotFoundError("Customer not found")

        # Only values that actually change need a uniqueness check.
        new_email = patch.get("email") if patch.get("email") != current.email else None
        new_id_number = patch.get("id_number") if patch.get("id_number") != current.id_number else None
        if new_email is not None or new_id_number is not None:
            await ensure_unique(store, email=new_email, id_number=new_id_number)
    except CRMError:
        raise
    except Exception as e:
        raise storage_failure(e, "fetch customer", logger) from e

    async with store() as db:
        try:
            # The write re-checks is_active: a delete may have landed since the read.
            result = await db.execute(
                update(Customer)
                .where(_is_active(customer_id))
                .values(**patch, updated_at=utcnow())
                .returning(Customer)
            )
            customer = result.scalars().first()
            if customer is None:
                raise NotFoundError("Customer not found")
            await db.commit()
        except CRMError:
            await db.rollback()
            raise
        except Exception as e:
            await db.rollback()
            raise storage_failure(e, "update customer", logger, DUPLICATE_CUSTOMER) from e

    logger.info("Customer %s updated (%s)", customer_id, ", ".join(sorted(patch)) or "no fields")
    return CustomerResponse(
        message="Customer updated successfully",
        customer=CustomerOut.model_validate(customer),
    )


# --------------------------
# SOFT DELETE CUSTOMER
# --------------------------
async def delete_customer(store: sessionmaker, customer_id: UUID) -> MessageResponse:
    # Import inside to avoid circular import
    from app.services.consistency_service import soft_delete_cascade

    try:
        existing = await _first(store, select(Customer.id).where(_is_active(customer_id)))
    except Exception as e:
        raise storage_failure(e, "fetch customer", logger) from e
    if existing is None:
        raise NotFoundError("Customer not found")

    await soft_delete_cascade(store, customer_id)
    return MessageResponse(message="Customer deleted successfully")


# --------------------------
# DEACTIVATION STEP (runs inside the caller's transaction)
# --------------------------
async def deactivate(db: AsyncSession, customer_id: UUID) -> int:
    result = await db.execute(
        update(Customer)
        .where(_is_active(customer_id))
        .values(is_active=False, updated_at=utcnow())
        .execution_options(synchronize_session=False)
    )
    return result.rowcount or 0
