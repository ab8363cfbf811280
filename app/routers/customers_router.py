# app/routers/customers_router.py
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import sessionmaker

from app.core.db import get_store
from app.schemas.customer_schemas import (
    CustomerCreate,
    CustomerDetailResponse,
    CustomerLevel,
    CustomerListResponse,
    CustomerResponse,
    CustomerStatus,
    CustomerUpdate,
    MessageResponse,
    RelationshipCreate,
    RelationshipResponse,
)
from app.services import customer_service, relationship_service
from app.utils.get_user import get_current_user

router = APIRouter(prefix="/customers", tags=["Customers"])


# RELATIONSHIPS
@router.post("/relationships", response_model=RelationshipResponse, status_code=status.HTTP_201_CREATED)
async def add_relationship_route(
    relationship: RelationshipCreate,
    store: sessionmaker = Depends(get_store),
    _user=Depends(get_current_user),
):
    return await relationship_service.add_relationship(store, relationship)


@router.delete("/relationships/{relationship_id}", response_model=MessageResponse)
async def remove_relationship_route(
    relationship_id: UUID,
    store: sessionmaker = Depends(get_store),
    _user=Depends(get_current_user),
):
    return await relationship_service.remove_relationship(store, relationship_id)


# GET ALL WITH SEARCH, FILTERS, PAGINATION
@router.get("", response_model=CustomerListResponse)
async def list_customers_route(
    store: sessionmaker = Depends(get_store),
    _user=Depends(get_current_user),
    page: int = Query(1, ge=1, le=1000, description="Page number"),
    limit: int = Query(10, ge=1, le=100, description="Results per page"),
    search: Optional[str] = Query(None, max_length=100, description="Match name, email, phone or company"),
    status_filter: Optional[CustomerStatus] = Query(None, alias="status", description="Filter by status"),
    customer_level: Optional[CustomerLevel] = Query(None, alias="customerLevel", description="Filter by level"),
):
    return await customer_service.list_customers(store, page, limit, search, status_filter, customer_level)


# GET SINGLE
@router.get("/{customer_id}", response_model=CustomerDetailResponse)
async def get_customer_route(
    customer_id: UUID,
    store: sessionmaker = Depends(get_store),
    _user=Depends(get_current_user),
):
    return await customer_service.get_customer(store, customer_id)


# CREATE
@router.post("", response_model=CustomerResponse, status_code=status.HTTP_201_CREATED)
async def create_customer_route(
    customer: CustomerCreate,
    store: sessionmaker = Depends(get_store),
    _user=Depends(get_current_user),
):
    return await customer_service.create_customer(store, customer, _user.id)


# UPDATE
@router.put("/{customer_id}", response_model=CustomerResponse)
async def update_customer_route(
    customer_id: UUID,
    customer: CustomerUpdate,
    store: sessionmaker = Depends(get_store),
    _user=Depends(get_current_user),
):
    return await customer_service.update_customer(store, customer_id, customer.model_dump(exclude_unset=True))


# SOFT DELETE
@router.delete("/{customer_id}", response_model=MessageResponse)
async def delete_customer_route(
    customer_id: UUID,
    store: sessionmaker = Depends(get_store),
    _user=Depends(get_current_user),
):
    return await customer_service.delete_customer(store, customer_id)
