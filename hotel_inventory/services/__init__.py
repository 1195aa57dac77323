from hotel_inventory.services.api_client import ApiClient, ApiResponse
from hotel_inventory.services.inventory_client import InventoryClient
from hotel_inventory.services.supplier_client import SupplierClient

__all__ = [
    "ApiClient",
    "ApiResponse",
    "InventoryClient",
    "SupplierClient",
]
