# app/schemas/customer_schemas.py
from datetime import date, datetime
from typing import List, Literal, Optional
from uuid import UUID

from pydantic import AnyHttpUrl, BaseModel, ConfigDict, EmailStr, Field, TypeAdapter, field_validator, model_validator
from pydantic.alias_generators import to_camel

Gender = Literal["male", "female", "other"]
CustomerLevel = Literal["A", "B", "C", "D", "E"]
CustomerStatus = Literal["active", "inactive", "potential", "lost"]
Priority = Literal["high", "normal", "low"]

_url_adapter = TypeAdapter(AnyHttpUrl)


class CamelModel(BaseModel):
    """JSON bodies use camelCase, attributes stay snake_case."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


# ---------------------------
# Customer payloads
# ---------------------------
class CustomerFields(CamelModel):
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=20)
    id_number: Optional[str] = Field(None, max_length=20)
    gender: Optional[Gender] = None
    birthday: Optional[date] = None
    zodiac_sign: Optional[str] = Field(None, max_length=20)
    interests: Optional[str] = Field(None, max_length=500)
    is_married: Optional[bool] = None
    has_children: Optional[bool] = None
    customer_source: Optional[str] = Field(None, max_length=100)
    company: Optional[str] = Field(None, max_length=200)
    position: Optional[str] = Field(None, max_length=100)
    address: Optional[str] = Field(None, max_length=500)
    city: Optional[str] = Field(None, max_length=50)
    country: Optional[str] = Field(None, max_length=50)
    website: Optional[str] = None
    notes: Optional[str] = Field(None, max_length=1000)
    last_contact_date: Optional[datetime] = None

    @field_validator("email", "website", "id_number", mode="before")
    @classmethod
    def blank_as_missing(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("website")
    @classmethod
    def check_website(cls, v):
        if v is not None:
            _url_adapter.validate_python(v)
        return v


class CustomerCreate(CustomerFields):
    name: str = Field(..., min_length=1, max_length=100)
    customer_level: CustomerLevel = "C"
    status: CustomerStatus = "active"
    priority: Priority = "normal"


class CustomerUpdate(CustomerFields):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    customer_level: Optional[CustomerLevel] = None
    status: Optional[CustomerStatus] = None
    priority: Optional[Priority] = None

    @field_validator("name", "customer_level", "status", "priority")
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("may not be null")
        return v


class CustomerOut(CamelModel):
    id: UUID
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    id_number: Optional[str] = None
    gender: Optional[str] = None
    birthday: Optional[date] = None
    zodiac_sign: Optional[str] = None
    interests: Optional[str] = None
    is_married: Optional[bool] = None
    has_children: Optional[bool] = None
    customer_level: str
    customer_source: Optional[str] = None
    company: Optional[str] = None
    position: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None
    website: Optional[str] = None
    notes: Optional[str] = None
    status: str
    priority: str
    assigned_to: Optional[UUID] = None
    last_contact_date: Optional[datetime] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime


# ---------------------------
# Relationship payloads
# ---------------------------
class RelationshipCreate(CamelModel):
    customer_id: UUID
    related_customer_id: UUID
    relationship_type: str = Field(..., min_length=1, max_length=50)
    notes: Optional[str] = Field(None, max_length=500)

    @model_validator(mode="after")
    def no_self_reference(self):
        if self.customer_id == self.related_customer_id:
            raise ValueError("A customer cannot be related to itself")
        return self


class RelationshipOut(CamelModel):
    id: UUID
    customer_id: UUID
    related_customer_id: UUID
    relationship_type: str
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class RelatedCustomerOut(CamelModel):
    id: UUID
    related_customer_id: UUID
    relationship_type: str
    notes: Optional[str] = None
    related_customer_name: Optional[str] = None


# ---------------------------
# Responses
# ---------------------------
class Pagination(CamelModel):
    page: int
    limit: int
    total: int
    total_pages: int


class CustomerListResponse(CamelModel):
    message: str
    customers: List[CustomerOut]
    pagination: Pagination


class CustomerResponse(CamelModel):
    message: str
    customer: CustomerOut


class CustomerDetailResponse(CamelModel):
    message: str
    customer: CustomerOut
    relationships: List[RelatedCustomerOut]


class RelationshipResponse(CamelModel):
    message: str
    relationship: RelationshipOut


class MessageResponse(CamelModel):
    message: str
