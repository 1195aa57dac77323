import logging
from typing import List, Optional

from pydantic import ValidationError

from hotel_inventory.config import get_settings
from hotel_inventory.core.constants import (
    DEFAULT_PAGE,
    INVENTORY_CATEGORIES,
    INVENTORY_DEPARTMENTS,
    INVENTORY_LOCATIONS,
    INVENTORY_UNITS,
    NEW_ITEM_ID,
)
from hotel_inventory.core.dates import to_api_timestamp, to_query_date, utc_now
from hotel_inventory.schemas.inventory import (
    InventoryItem,
    InventoryStats,
    ItemPage,
    Pagination,
    StockTransaction,
    StockUpdate,
    StockUpdateResult,
    TransactionPage,
    TransferResult,
    normalize_transaction_type,
)
from hotel_inventory.services.api_client import ResourceClient, path_segment, to_payload

logger = logging.getLogger(__name__)


def _format_flag(value):
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _with_reason(prefix, reason):
    reason_text = str(reason or "").strip()
    if reason_text:
        return "{} - {}".format(prefix, reason_text)
    return prefix


def build_item_query(page, limit, search="", category="", supplier="", stock_status="", is_active=""):
    params = [("page", page), ("limit", limit)]
    for key, value in (
        ("search", search),
        ("category", category),
        ("supplier", supplier),
        ("stockStatus", stock_status),
    ):
        if value:
            params.append((key, value))
    if is_active is not None and is_active != "":
        params.append(("isActive", _format_flag(is_active)))
    return params


def build_transaction_query(page, limit, start_date=None, end_date=None, type=None):
    params = [("page", page), ("limit", limit)]
    start_text = to_query_date(start_date)
    end_text = to_query_date(end_date)
    if start_text:
        params.append(("startDate", start_text))
    if end_text:
        params.append(("endDate", end_text))
    if type:
        params.append(("type", normalize_transaction_type(type)))
    return params


class InventoryClient(ResourceClient):
    """Inventory items, stock movements and their history.

    Failures never raise: the message lands in ``error``, an error notice is
    emitted, and the operation returns ``None`` (``False`` for deletes).
    """

    def __init__(self, api=None, notifier=None, clock=None, page_size=None):
        super().__init__(api=api, notifier=notifier)
        self.clock = clock or utc_now
        self.page_size = page_size or get_settings().INVENTORY_PAGE_SIZE
        self.items: List[InventoryItem] = []
        self.pagination = Pagination(limit=self.page_size)
        self.total_items = 0

    # ------------------------------------------------------------------
    # Items
    # ------------------------------------------------------------------
    def fetch_inventory_items(
        self,
        page=DEFAULT_PAGE,
        limit=None,
        search="",
        category="",
        supplier="",
        stock_status="",
        is_active="",
    ) -> Optional[ItemPage]:
        limit = limit or self.page_size
        params = build_item_query(page, limit, search, category, supplier, stock_status, is_active)
        response = self.api.request("/inventory", "GET", params=params)
        if not response.ok:
            return self._fail(response.error)

        envelope = response.envelope()
        try:
            items = [InventoryItem.model_validate(row) for row in response.data or []]
            pagination = Pagination.model_validate(
                envelope.get("pagination") or {"page": page, "limit": limit}
            )
        except ValidationError as exc:
            return self._invalid_payload(exc)

        total = envelope.get("total", envelope.get("count", len(items)))
        self.items = items
        self.pagination = pagination
        self.total_items = int(total or 0)
        self._succeed()
        return ItemPage(items=items, pagination=pagination, total=self.total_items)

    get_inventory_items = fetch_inventory_items

    def get_inventory_item_by_id(self, item_id) -> Optional[InventoryItem]:
        # "new" is the create-page route id, not a real item
        if item_id == NEW_ITEM_ID:
            return None

        response = self.api.request("/inventory/{}".format(path_segment(item_id)), "GET")
        if not response.ok:
            return self._fail(response.error)
        try:
            item = InventoryItem.model_validate(response.data)
        except ValidationError as exc:
            return self._invalid_payload(exc)
        self._succeed()
        return item

    def create_inventory_item(self, data) -> Optional[InventoryItem]:
        response = self.api.request("/inventory", "POST", data=to_payload(data))
        if not response.ok:
            return self._fail(response.error)
        try:
            item = InventoryItem.model_validate(response.data)
        except ValidationError as exc:
            return self._invalid_payload(exc)
        self._succeed("Inventory item created successfully")
        return item

    def update_inventory_item(self, item_id, data) -> Optional[InventoryItem]:
        response = self.api.request(
            "/inventory/{}".format(path_segment(item_id)), "PUT", data=to_payload(data)
        )
        if not response.ok:
            return self._fail(response.error)
        try:
            item = InventoryItem.model_validate(response.data)
        except ValidationError as exc:
            return self._invalid_payload(exc)
        self._succeed("Inventory item updated successfully")
        return item

    def delete_inventory_item(self, item_id) -> bool:
        response = self.api.request("/inventory/{}".format(path_segment(item_id)), "DELETE")
        if not response.ok:
            self._fail(response.error)
            return False
        message = response.envelope().get("message") or "Inventory item deleted successfully"
        self._succeed(message)
        return True

    # ------------------------------------------------------------------
    # Stock
    # ------------------------------------------------------------------
    def update_stock_level(self, item_id, update=None, notify=True, **fields) -> Optional[StockUpdateResult]:
        """Apply one stock movement to an item.

        ``update`` is a :class:`StockUpdate` or a mapping of its fields.
        When no ``transaction_date`` is given the current time is stamped
        before sending; an explicit value is forwarded unchanged.
        """
        if not isinstance(update, StockUpdate):
            update = StockUpdate.model_validate(dict(update or {}, **fields))

        payload = update.to_payload()
        if "transaction_date" not in payload:
            payload["transaction_date"] = to_api_timestamp(self.clock())

        response = self.api.request(
            "/inventory/{}/stock".format(path_segment(item_id)), "PATCH", data=payload
        )
        if not response.ok:
            return self._fail(response.error, notify=notify)
        try:
            result = StockUpdateResult.model_validate(response.data or {})
        except ValidationError as exc:
            return self._invalid_payload(exc, notify=notify)
        self._succeed("Stock updated successfully", notify=notify)
        return result

    def get_item_transactions(
        self,
        item_id,
        page=DEFAULT_PAGE,
        limit=None,
        start_date=None,
        end_date=None,
        type=None,
    ) -> Optional[TransactionPage]:
        limit = limit or self.page_size
        params = build_transaction_query(page, limit, start_date, end_date, type)
        response = self.api.request(
            "/inventory/{}/transactions".format(path_segment(item_id)), "GET", params=params
        )
        if not response.ok:
            return self._fail(response.error)

        envelope = response.envelope()
        try:
            transactions = [StockTransaction.model_validate(row) for row in response.data or []]
            pagination = Pagination.model_validate(
                envelope.get("pagination") or {"page": page, "limit": limit}
            )
        except ValidationError as exc:
            return self._invalid_payload(exc)
        self._succeed()
        return TransactionPage(
            transactions=transactions,
            pagination=pagination,
            total=int(envelope.get("total", envelope.get("count", len(transactions))) or 0),
        )

    def fetch_low_stock_items(self) -> Optional[List[InventoryItem]]:
        response = self.api.request("/inventory/low-stock", "GET")
        if not response.ok:
            return self._fail(response.error)
        try:
            items = [InventoryItem.model_validate(row) for row in response.data or []]
        except ValidationError as exc:
            return self._invalid_payload(exc)
        self._succeed()
        return items

    def fetch_inventory_stats(self) -> Optional[InventoryStats]:
        response = self.api.request("/inventory/stats", "GET")
        if not response.ok:
            return self._fail(response.error)
        try:
            stats = InventoryStats.model_validate(response.data or {})
        except ValidationError as exc:
            return self._invalid_payload(exc)
        self._succeed()
        return stats

    # ------------------------------------------------------------------
    # Transfers
    # ------------------------------------------------------------------
    def transfer_stock(
        self, from_item_id, to_item_id, quantity, reason=None, department=None
    ) -> Optional[TransferResult]:
        """Move ``quantity`` units from one item to another.

        The two legs are independent requests. If the second leg fails the
        source item stays debited: no compensating movement is sent.
        """
        if quantity is None or quantity <= 0:
            raise ValueError("quantity must be greater than zero")
        if str(from_item_id) == str(to_item_id):
            raise ValueError("source and destination items must differ")

        deducted = self.update_stock_level(
            from_item_id,
            StockUpdate(
                quantity=quantity,
                type="transfer",
                department=department,
                reason=_with_reason("Transfer to item ID: {}".format(to_item_id), reason),
            ),
            notify=False,
        )
        if deducted is None:
            leg_error = self.error
            return self._fail(_with_reason("Failed to deduct stock from source item", leg_error))

        added = self.update_stock_level(
            to_item_id,
            StockUpdate(
                quantity=quantity,
                type="transfer",
                department=department,
                reason=_with_reason("Transfer from item ID: {}".format(from_item_id), reason),
            ),
            notify=False,
        )
        if added is None:
            leg_error = self.error
            logger.warning(
                "Partial transfer: item %s was debited %s units but crediting item %s failed (%s)",
                from_item_id,
                quantity,
                to_item_id,
                leg_error,
                extra={"item_id": from_item_id, "to_item_id": to_item_id, "quantity": quantity},
            )
            return self._fail(
                _with_reason(
                    "Failed to add stock to destination item; source item {} was already debited".format(
                        from_item_id
                    ),
                    leg_error,
                )
            )

        self._succeed(
            "Transferred {} units from item {} to item {}".format(quantity, from_item_id, to_item_id)
        )
        return TransferResult(source=deducted, destination=added)

    def transfer_stock_to_department(
        self, item_id, quantity, department, reason=None
    ) -> Optional[StockUpdateResult]:
        department = str(department or "").strip()
        if not department:
            raise ValueError("department is required")
        if quantity is None or quantity <= 0:
            raise ValueError("quantity must be greater than zero")

        return self.update_stock_level(
            item_id,
            StockUpdate(
                quantity=quantity,
                type="use",
                department=department,
                reason=_with_reason("Transfer to {} department".format(department), reason),
            ),
        )

    # ------------------------------------------------------------------
    # Reference data
    # ------------------------------------------------------------------
    def get_inventory_categories(self) -> List[str]:
        return list(INVENTORY_CATEGORIES)

    def get_inventory_units(self) -> List[str]:
        return list(INVENTORY_UNITS)

    def get_inventory_locations(self) -> List[str]:
        return list(INVENTORY_LOCATIONS)

    def get_inventory_departments(self) -> List[str]:
        return list(INVENTORY_DEPARTMENTS)


__all__ = ["InventoryClient", "build_item_query", "build_transaction_query"]
