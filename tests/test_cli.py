import io
import unittest
from contextlib import redirect_stdout
from datetime import datetime, timezone
from unittest.mock import patch

from hotel_inventory import cli
from hotel_inventory.core.notifications import Notifier
from hotel_inventory.services.api_client import ApiResponse
from hotel_inventory.services.inventory_client import InventoryClient
from hotel_inventory.services.supplier_client import SupplierClient

FIXED_NOW = datetime(2026, 3, 14, 9, 30, tzinfo=timezone.utc)
TOWEL = {"_id": "item-1", "name": "Bath towel", "unit": "piece", "currentStock": 40, "reorderPoint": 15}


class StubApi:
    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []
        self.loading = False

    def request(self, endpoint, method="GET", data=None, params=None):
        self.calls.append(
            {"endpoint": endpoint, "method": method, "data": data, "params": list(params or [])}
        )
        return self.responses.pop(0)


def _ok(data, **envelope):
    body = {"success": True, "data": data}
    body.update(envelope)
    return ApiResponse(data=data, status=200, body=body)


def _stock(current_stock):
    return _ok({"currentStock": current_stock, "stockStatus": "in_stock"})


@patch("hotel_inventory.cli.setup_logging")
class InventoryCliTest(unittest.TestCase):
    def _run(self, argv, *responses):
        self.api = StubApi(*responses)
        notifier = Notifier()
        client = InventoryClient(api=self.api, notifier=notifier, clock=lambda: FIXED_NOW, page_size=20)
        suppliers = SupplierClient(api=self.api, notifier=notifier, page_size=20)
        out = io.StringIO()
        with redirect_stdout(out):
            cli.main(argv, client=client, supplier_client=suppliers)
        return out.getvalue()

    def test_list(self, _setup_logging):
        output = self._run(
            ["list", "--search", "towel", "--active"],
            _ok([dict(TOWEL, currentStock=12)], total=1, pagination={"page": 1, "limit": 20, "totalPages": 1}),
        )
        self.assertEqual(
            self.api.calls[0]["params"],
            [("page", 1), ("limit", 20), ("search", "towel"), ("isActive", "true")],
        )
        self.assertIn("Bath towel", output)
        self.assertIn("LOW", output)
        self.assertIn("Page 1/1, 1 items", output)

    def test_show_failure_exits_with_server_message(self, _setup_logging):
        error = ApiResponse(error="Inventory item not found", status=404)
        with self.assertRaises(SystemExit) as ctx:
            self._run(["show", "missing"], error)
        self.assertEqual(str(ctx.exception), "Lookup failed: Inventory item not found")

    def test_show_rejects_new_sentinel(self, _setup_logging):
        with self.assertRaises(SystemExit) as ctx:
            self._run(["show", "new"])
        self.assertEqual(str(ctx.exception), '"new" is not an item id; use the create command')
        self.assertEqual(self.api.calls, [])

    def test_transfer_from_new_sentinel_reports_not_found(self, _setup_logging):
        with self.assertRaises(SystemExit) as ctx:
            self._run(["transfer", "new", "item-2", "--quantity", "1"])
        self.assertEqual(str(ctx.exception), "Lookup failed: item not found")

    def test_adjust_sends_stock_movement(self, _setup_logging):
        output = self._run(
            ["adjust", "item-1", "--quantity", "5", "--type", "restock", "--reference", "PO-17"],
            _stock(45),
        )
        self.assertEqual(
            self.api.calls[0]["data"],
            {
                "quantity": 5.0,
                "type": "restock",
                "reference_number": "PO-17",
                "transaction_date": FIXED_NOW.isoformat(),
            },
        )
        self.assertIn("Stock now 45", output)

    def test_transfer_checks_available_stock(self, _setup_logging):
        with self.assertRaises(SystemExit) as ctx:
            self._run(["transfer", "item-1", "item-2", "--quantity", "50"], _ok(TOWEL))
        self.assertEqual(str(ctx.exception), "Cannot transfer more than available stock (40 piece)")
        self.assertEqual(len(self.api.calls), 1)

    def test_transfer(self, _setup_logging):
        output = self._run(
            ["transfer", "item-1", "item-2", "--quantity", "5"],
            _ok(TOWEL),
            _stock(35),
            _stock(25),
        )
        self.assertEqual([c["endpoint"] for c in self.api.calls[1:]], [
            "/inventory/item-1/stock",
            "/inventory/item-2/stock",
        ])
        self.assertIn("now 35", output)
        self.assertIn("now 25", output)

    def test_transfer_department(self, _setup_logging):
        output = self._run(
            ["transfer-department", "item-1", "--department", "Spa", "--quantity", "4"],
            _stock(36),
        )
        self.assertEqual(self.api.calls[0]["data"]["type"], "use")
        self.assertIn("Issued 4 to Spa", output)

    def test_create_and_delete(self, _setup_logging):
        output = self._run(["create", "--name", "Bath towel", "--unit", "piece", "--min-stock", "10"], _ok(TOWEL))
        self.assertEqual(
            self.api.calls[0]["data"], {"name": "Bath towel", "unit": "piece", "minStockLevel": 10.0}
        )
        self.assertIn("Created Bath towel (item-1)", output)

        output = self._run(["delete", "item-1"], _ok({}, message="Inventory item removed"))
        self.assertIn("Deleted item-1", output)

    def test_stats_and_reference(self, _setup_logging):
        output = self._run(
            ["stats"],
            _ok({"totalItems": 3, "activeItems": 2, "totalValue": 99.5, "categoryStats": [], "stockStatus": []}),
        )
        self.assertIn("Items: 3 (2 active)", output)
        self.assertIn("Total value: 99.50", output)

        output = self._run(["reference"])
        self.assertIn("Departments: Kitchen", output)
        self.assertEqual(self.api.calls, [])

    def test_suppliers(self, _setup_logging):
        output = self._run(
            ["suppliers", "--search", "linen"],
            _ok([{"_id": "sup-1", "name": "Linen Co"}], total=1),
        )
        self.assertEqual(self.api.calls[0]["endpoint"], "/suppliers")
        self.assertIn("Linen Co", output)


if __name__ == "__main__":
    unittest.main()
