# salon_booking/schemas/customer.py
from __future__ import annotations
from pydantic import BaseModel, Field
from typing import Any, Dict, Optional
from uuid import UUID


class IdentifyCustomerRequest(BaseModel):
    phone: str = Field(..., min_length=1, max_length=30)
    name: Optional[str] = Field(None, max_length=200)


class CustomerDTO(BaseModel):
    id: UUID
    salon_id: UUID
    name: str
    phone: str
    email: Optional[str] = None
    preferences: Dict[str, Any] = Field(default_factory=dict)


class IdentifyCustomerResult(BaseModel):
    found: bool
    created: bool = False
    customer: Optional[CustomerDTO] = None


class UpdatePreferencesRequest(BaseModel):
    preferences: Dict[str, Any]
