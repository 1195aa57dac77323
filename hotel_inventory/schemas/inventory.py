from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from hotel_inventory.core.constants import (
    DEFAULT_PAGE,
    DEFAULT_PAGE_SIZE,
    TRANSACTION_STATUSES,
    TRANSACTION_TYPES,
)
from hotel_inventory.core.dates import to_api_timestamp

_TYPE_ALIASES = {
    "consumption": "use",
    "usage": "use",
}


def normalize_transaction_type(value):
    type_text = str(value or "").strip().lower()
    type_text = _TYPE_ALIASES.get(type_text, type_text)
    if type_text not in TRANSACTION_TYPES:
        raise ValueError(
            "type must be one of: {}".format(", ".join(TRANSACTION_TYPES))
        )
    return type_text


class SupplierSummary(BaseModel):
    id: str = Field(validation_alias=AliasChoices("_id", "id"), serialization_alias="_id")
    name: Optional[str] = None
    contact_person: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True, extra="allow")


class UserSummary(BaseModel):
    id: str = Field(validation_alias=AliasChoices("_id", "id"), serialization_alias="_id")
    full_name: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True, extra="allow")


class InventoryItem(BaseModel):
    """Snapshot of an inventory item as returned by the API.

    The API is not consistent about field naming (``currentStock`` vs
    ``quantity_in_stock``, ``minStockLevel`` vs ``reorder_level``...); both
    spellings populate the same attribute.
    """

    id: str = Field(validation_alias=AliasChoices("_id", "id"), serialization_alias="_id")
    name: str
    description: Optional[str] = None
    category: Optional[str] = None
    sku: Optional[str] = None
    barcode: Optional[str] = None
    unit: Optional[str] = None
    unit_price: float = Field(
        default=0.0,
        validation_alias=AliasChoices("unitPrice", "price_per_unit", "unit_price"),
        serialization_alias="unitPrice",
    )
    current_stock: float = Field(
        default=0.0,
        validation_alias=AliasChoices("currentStock", "quantity_in_stock", "current_stock"),
        serialization_alias="currentStock",
    )
    min_stock_level: float = Field(
        default=0.0,
        validation_alias=AliasChoices("minStockLevel", "reorder_level", "min_stock_level"),
        serialization_alias="minStockLevel",
    )
    max_stock_level: Optional[float] = Field(
        default=None,
        validation_alias=AliasChoices("maxStockLevel", "max_stock_level"),
        serialization_alias="maxStockLevel",
    )
    reorder_point: Optional[float] = Field(
        default=None,
        validation_alias=AliasChoices("reorderPoint", "reorder_point"),
        serialization_alias="reorderPoint",
    )
    reorder_quantity: Optional[float] = Field(
        default=None,
        validation_alias=AliasChoices("reorderQuantity", "reorder_quantity"),
        serialization_alias="reorderQuantity",
    )
    total_value: Optional[float] = Field(
        default=None,
        validation_alias=AliasChoices("total_value", "totalValue"),
    )
    location: Optional[str] = None
    supplier: Optional[Union[str, SupplierSummary]] = None
    expiry_date: Optional[datetime] = Field(
        default=None,
        validation_alias=AliasChoices("expiryDate", "expiry_date"),
        serialization_alias="expiryDate",
    )
    is_perishable: bool = Field(
        default=False,
        validation_alias=AliasChoices("isPerishable", "is_perishable"),
        serialization_alias="isPerishable",
    )
    is_active: bool = Field(
        default=True,
        validation_alias=AliasChoices("isActive", "is_active"),
        serialization_alias="isActive",
    )
    image: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    notes: Optional[str] = None
    last_restock_date: Optional[datetime] = Field(
        default=None,
        validation_alias=AliasChoices("lastRestockDate", "last_restock_date"),
    )
    last_count_date: Optional[datetime] = Field(
        default=None,
        validation_alias=AliasChoices("lastCountDate", "last_count_date"),
    )
    created_at: Optional[datetime] = Field(
        default=None, validation_alias=AliasChoices("createdAt", "created_at")
    )
    updated_at: Optional[datetime] = Field(
        default=None, validation_alias=AliasChoices("updatedAt", "updated_at")
    )
    stock_status: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("stockStatus", "stock_status")
    )

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    @property
    def supplier_id(self) -> Optional[str]:
        if isinstance(self.supplier, SupplierSummary):
            return self.supplier.id
        return self.supplier

    @property
    def reorder_threshold(self) -> float:
        if self.reorder_point is not None:
            return self.reorder_point
        return self.min_stock_level

    @property
    def is_low_stock(self) -> bool:
        return self.current_stock <= self.reorder_threshold


class InventoryItemPayload(BaseModel):
    """Fields accepted by the create/update item endpoints."""

    name: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    sku: Optional[str] = None
    barcode: Optional[str] = None
    unit: Optional[str] = None
    unit_price: Optional[float] = Field(default=None, serialization_alias="unitPrice")
    current_stock: Optional[float] = Field(default=None, serialization_alias="currentStock")
    min_stock_level: Optional[float] = Field(default=None, serialization_alias="minStockLevel")
    max_stock_level: Optional[float] = Field(default=None, serialization_alias="maxStockLevel")
    reorder_point: Optional[float] = Field(default=None, serialization_alias="reorderPoint")
    reorder_quantity: Optional[float] = Field(default=None, serialization_alias="reorderQuantity")
    location: Optional[str] = None
    supplier: Optional[str] = None
    expiry_date: Optional[datetime] = Field(default=None, serialization_alias="expiryDate")
    is_perishable: Optional[bool] = Field(default=None, serialization_alias="isPerishable")
    is_active: Optional[bool] = Field(default=None, serialization_alias="isActive")
    tags: Optional[List[str]] = None
    notes: Optional[str] = None

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class StockTransaction(BaseModel):
    id: str = Field(validation_alias=AliasChoices("_id", "id"), serialization_alias="_id")
    item: Optional[Union[str, Dict[str, Any]]] = None
    type: str
    quantity: float
    unit_price: float = 0.0
    transaction_date: Optional[datetime] = None
    department: Optional[str] = None
    reference_number: Optional[str] = None
    reason: Optional[str] = None
    performed_by: Optional[Union[str, UserSummary]] = Field(
        default=None, validation_alias=AliasChoices("performedBy", "performed_by")
    )
    approved_by: Optional[Union[str, UserSummary]] = Field(
        default=None, validation_alias=AliasChoices("approvedBy", "approved_by")
    )
    status: str = "completed"
    created_at: Optional[datetime] = Field(
        default=None, validation_alias=AliasChoices("createdAt", "created_at")
    )
    updated_at: Optional[datetime] = Field(
        default=None, validation_alias=AliasChoices("updatedAt", "updated_at")
    )

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    @field_validator("type", mode="before")
    @classmethod
    def _normalize_type(cls, value):
        return normalize_transaction_type(value)

    @field_validator("status", mode="before")
    @classmethod
    def _normalize_status(cls, value):
        status_text = str(value or "").strip().lower()
        if status_text not in TRANSACTION_STATUSES:
            raise ValueError(
                "status must be one of: {}".format(", ".join(TRANSACTION_STATUSES))
            )
        return status_text


class StockUpdate(BaseModel):
    """One stock movement sent to ``PATCH /inventory/{id}/stock``."""

    quantity: float
    type: str
    reason: Optional[str] = None
    unit_price: Optional[float] = None
    department: Optional[str] = None
    reference_number: Optional[str] = None
    transaction_date: Optional[Union[datetime, str]] = None

    @field_validator("quantity")
    @classmethod
    def _quantity_not_zero(cls, value):
        if value == 0:
            raise ValueError("quantity must be non-zero")
        return value

    @field_validator("type", mode="before")
    @classmethod
    def _normalize_type(cls, value):
        return normalize_transaction_type(value)

    def to_payload(self) -> Dict[str, Any]:
        payload = self.model_dump(exclude_none=True)
        if isinstance(self.transaction_date, datetime):
            payload["transaction_date"] = to_api_timestamp(self.transaction_date)
        return payload


class StockUpdateResult(BaseModel):
    transaction: Optional[StockTransaction] = None
    current_stock: Optional[float] = Field(
        default=None,
        validation_alias=AliasChoices("currentStock", "quantity_in_stock", "current_stock"),
    )
    stock_status: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("stockStatus", "stock_status")
    )

    model_config = ConfigDict(populate_by_name=True, extra="allow")


class Pagination(BaseModel):
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_PAGE_SIZE
    total_pages: int = Field(
        default=1, validation_alias=AliasChoices("totalPages", "total_pages")
    )

    model_config = ConfigDict(populate_by_name=True, extra="allow")


class ItemPage(BaseModel):
    items: List[InventoryItem] = Field(default_factory=list)
    pagination: Pagination = Field(default_factory=Pagination)
    total: int = 0


class TransactionPage(BaseModel):
    transactions: List[StockTransaction] = Field(default_factory=list)
    pagination: Pagination = Field(default_factory=Pagination)
    total: int = 0


class CategoryStat(BaseModel):
    id: Optional[str] = Field(default=None, validation_alias=AliasChoices("_id", "id"))
    count: int = 0
    value: float = 0.0

    model_config = ConfigDict(populate_by_name=True)


class StockStatusStat(BaseModel):
    id: Optional[str] = Field(default=None, validation_alias=AliasChoices("_id", "id"))
    count: int = 0

    model_config = ConfigDict(populate_by_name=True)


class InventoryStats(BaseModel):
    total_items: int = Field(default=0, validation_alias=AliasChoices("totalItems", "total_items"))
    active_items: int = Field(default=0, validation_alias=AliasChoices("activeItems", "active_items"))
    total_value: float = Field(default=0.0, validation_alias=AliasChoices("totalValue", "total_value"))
    category_stats: List[CategoryStat] = Field(
        default_factory=list, validation_alias=AliasChoices("categoryStats", "category_stats")
    )
    stock_status: List[StockStatusStat] = Field(
        default_factory=list, validation_alias=AliasChoices("stockStatus", "stock_status")
    )

    model_config = ConfigDict(populate_by_name=True, extra="allow")


class TransferResult(BaseModel):
    source: StockUpdateResult
    destination: StockUpdateResult


__all__ = [
    "CategoryStat",
    "InventoryItem",
    "InventoryItemPayload",
    "InventoryStats",
    "ItemPage",
    "Pagination",
    "StockStatusStat",
    "StockTransaction",
    "StockUpdate",
    "StockUpdateResult",
    "SupplierSummary",
    "TransactionPage",
    "TransferResult",
    "UserSummary",
    "normalize_transaction_type",
]
