from typing import List, Optional

from pydantic import ValidationError

from hotel_inventory.config import get_settings
from hotel_inventory.core.constants import DEFAULT_PAGE
from hotel_inventory.schemas.inventory import InventoryItem, Pagination
from hotel_inventory.schemas.supplier import Supplier
from hotel_inventory.services.api_client import ResourceClient, path_segment, to_payload


class SupplierClient(ResourceClient):
    def __init__(self, api=None, notifier=None, page_size=None):
        super().__init__(api=api, notifier=notifier)
        self.page_size = page_size or get_settings().INVENTORY_PAGE_SIZE
        self.suppliers: List[Supplier] = []
        self.supplier: Optional[Supplier] = None
        self.supplier_items: List[InventoryItem] = []
        self.pagination = Pagination(limit=self.page_size)
        self.total_suppliers = 0

    def get_suppliers(
        self,
        search=None,
        category=None,
        is_active=None,
        page=DEFAULT_PAGE,
        limit=None,
        sort="name",
    ) -> Optional[List[Supplier]]:
        limit = limit or self.page_size
        params = [("page", page), ("limit", limit), ("sort", sort)]
        if search:
            params.append(("search", search))
        if category:
            params.append(("category", category))
        if is_active is not None:
            params.append(("isActive", "true" if is_active else "false"))

        response = self.api.request("/suppliers", "GET", params=params)
        if not response.ok:
            return self._fail(response.error or "Failed to fetch suppliers")

        envelope = response.envelope()
        try:
            suppliers = [Supplier.model_validate(row) for row in response.data or []]
            pagination = Pagination.model_validate(
                envelope.get("pagination") or {"page": page, "limit": limit}
            )
        except ValidationError as exc:
            return self._invalid_payload(exc)

        self.suppliers = suppliers
        self.pagination = pagination
        self.total_suppliers = int(envelope.get("total", envelope.get("count", len(suppliers))) or 0)
        self._succeed()
        return suppliers

    def get_supplier_by_id(self, supplier_id) -> Optional[Supplier]:
        response = self.api.request("/suppliers/{}".format(path_segment(supplier_id)), "GET")
        if not response.ok:
            return self._fail(response.error or "Failed to fetch supplier")
        try:
            supplier = Supplier.model_validate(response.data)
        except ValidationError as exc:
            return self._invalid_payload(exc)
        self.supplier = supplier
        self._succeed()
        return supplier

    def get_supplier_items(self, supplier_id) -> Optional[List[InventoryItem]]:
        response = self.api.request(
            "/suppliers/{}/items".format(path_segment(supplier_id)), "GET"
        )
        if not response.ok:
            return self._fail(response.error or "Failed to fetch supplier items")
        try:
            items = [InventoryItem.model_validate(row) for row in response.data or []]
        except ValidationError as exc:
            return self._invalid_payload(exc)
        self.supplier_items = items
        self._succeed()
        return items

    def create_supplier(self, data) -> Optional[Supplier]:
        response = self.api.request("/suppliers", "POST", data=to_payload(data))
        if not response.ok:
            return self._fail(response.error or "Failed to create supplier")
        try:
            supplier = Supplier.model_validate(response.data)
        except ValidationError as exc:
            return self._invalid_payload(exc)
        self._succeed("Supplier created successfully")
        return supplier

    def update_supplier(self, supplier_id, data) -> Optional[Supplier]:
        response = self.api.request(
            "/suppliers/{}".format(path_segment(supplier_id)), "PUT", data=to_payload(data)
        )
        if not response.ok:
            return self._fail(response.error or "Failed to update supplier")
        try:
            supplier = Supplier.model_validate(response.data)
        except ValidationError as exc:
            return self._invalid_payload(exc)
        self.supplier = supplier
        self._succeed("Supplier updated successfully")
        return supplier

    def delete_supplier(self, supplier_id) -> bool:
        response = self.api.request("/suppliers/{}".format(path_segment(supplier_id)), "DELETE")
        if not response.ok:
            self._fail(response.error or "Failed to delete supplier")
            return False
        self._succeed(response.envelope().get("message") or "Supplier deleted successfully")
        return True


__all__ = ["SupplierClient"]
