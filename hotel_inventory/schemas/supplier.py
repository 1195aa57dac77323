from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class SupplierAddress(BaseModel):
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None


class Supplier(BaseModel):
    id: str = Field(validation_alias=AliasChoices("_id", "id"), serialization_alias="_id")
    name: str
    code: Optional[str] = None
    contact_person: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None
    address: Optional[SupplierAddress] = None
    supplies: List[str] = Field(default_factory=list)
    categories: List[str] = Field(default_factory=list)
    payment_terms: Optional[str] = None
    credit_limit: Optional[float] = None
    currency: Optional[str] = None
    rating: Optional[float] = None
    lead_time: Optional[int] = None
    minimum_order: Optional[float] = None
    notes: Optional[str] = None
    is_active: bool = Field(default=True, validation_alias=AliasChoices("is_active", "isActive"))
    created_at: Optional[datetime] = Field(
        default=None, validation_alias=AliasChoices("createdAt", "created_at")
    )
    updated_at: Optional[datetime] = Field(
        default=None, validation_alias=AliasChoices("updatedAt", "updated_at")
    )

    model_config = ConfigDict(populate_by_name=True, extra="allow")


class SupplierPayload(BaseModel):
    name: Optional[str] = None
    code: Optional[str] = None
    contact_person: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None
    address: Optional[SupplierAddress] = None
    categories: Optional[List[str]] = None
    payment_terms: Optional[str] = None
    lead_time: Optional[int] = None
    minimum_order: Optional[float] = None
    notes: Optional[str] = None
    is_active: Optional[bool] = None

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True, mode="json")


__all__ = ["Supplier", "SupplierAddress", "SupplierPayload"]
