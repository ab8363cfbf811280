# app/services/relationship_service.py
import logging
from typing import List
from uuid import UUID

from sqlalchemy import and_, delete, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import sessionmaker

from app.core.exceptions import CRMError, ConflictError, NotFoundError, storage_failure
from app.models.customer_models import Customer, CustomerRelationship
from app.schemas.customer_schemas import (
    MessageResponse,
    RelatedCustomerOut,
    RelationshipCreate,
    RelationshipOut,
    RelationshipResponse,
)

logger = logging.getLogger(__name__)

DUPLICATE_RELATIONSHIP = "Relationship already exists"


# ---------------------------
# LIST RELATIONSHIPS OF A CUSTOMER
# ---------------------------
async def list_for_customer(store: sessionmaker, customer_id: UUID) -> List[RelatedCustomerOut]:
    """Outgoing edges of a customer, each with the related customer's name if still active."""
    stmt = (
        select(
            CustomerRelationship.id,
            CustomerRelationship.related_customer_id,
            CustomerRelationship.relationship_type,
            CustomerRelationship.notes,
            Customer.name.label("related_customer_name"),
        )
        .outerjoin(
            Customer,
            and_(
                CustomerRelationship.related_customer_id == Customer.id,
                Customer.is_active == True,
            ),
        )
        .where(CustomerRelationship.customer_id == customer_id)
        .order_by(CustomerRelationship.created_at)
    )
    async with store() as db:
        result = await db.execute(stmt)
        rows = result.all()
    return [RelatedCustomerOut.model_validate(dict(row._mapping)) for row in rows]


# ---------------------------
# ADD RELATIONSHIP
# ---------------------------
async def add_relationship(store: sessionmaker, data: RelationshipCreate) -> RelationshipResponse:
    async with store() as db:
        try:
            existing = await db.execute(
                select(CustomerRelationship.id).where(
                    CustomerRelationship.customer_id == data.customer_id,
                    CustomerRelationship.related_customer_id == data.related_customer_id,
                )
            )
            if existing.scalars().first():
                raise ConflictError(DUPLICATE_RELATIONSHIP)

            relationship = CustomerRelationship(**data.model_dump())
            db.add(relationship)
            await db.commit()
            await db.refresh(relationship)
        except CRMError:
            await db.rollback()
            raise
        except Exception as e:
            await db.rollback()
            raise storage_failure(e, "add relationship", logger, DUPLICATE_RELATIONSHIP) from e

    logger.info(
        "Relationship %s added: %s -[%s]-> %s",
        relationship.id, relationship.customer_id, relationship.relationship_type, relationship.related_customer_id,
    )
    return RelationshipResponse(
        message="Relationship added successfully",
        relationship=RelationshipOut.model_validate(relationship),
    )


# ---------------------------
# REMOVE RELATIONSHIP (hard delete)
# ---------------------------
async def remove_relationship(store: sessionmaker, relationship_id: UUID) -> MessageResponse:
    async with store() as db:
        try:
            relationship = await db.get(CustomerRelationship, relationship_id)
            if not relationship:
                raise NotFoundError("Relationship not found")
            await db.delete(relationship)
            await db.commit()
        except CRMError:
            await db.rollback()
            raise
        except Exception as e:
            await db.rollback()
            raise storage_failure(e, "remove relationship", logger) from e

    logger.info("Relationship %s removed", relationship_id)
    return MessageResponse(message="Relationship deleted successfully")


# ---------------------------
# CASCADE STEP (runs inside the caller's transaction)
# ---------------------------
async def delete_for_customer(db: AsyncSession, customer_id: UUID) -> int:
    result = await db.execute(
        delete(CustomerRelationship)
        .where(
            or_(
                CustomerRelationship.customer_id == customer_id,
                CustomerRelationship.related_customer_id == customer_id,
            )
        )
        .execution_options(synchronize_session=False)
    )
    return result.rowcount or 0
