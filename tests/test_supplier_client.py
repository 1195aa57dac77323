import unittest

from hotel_inventory.core.notifications import LEVEL_SUCCESS, Notifier
from hotel_inventory.schemas.supplier import SupplierPayload
from hotel_inventory.services.api_client import ApiResponse
from hotel_inventory.services.supplier_client import SupplierClient

LINEN_CO = {
    "_id": "sup-1",
    "name": "Linen Co",
    "contact_person": "Ana Ruiz",
    "phone": "+1 555 0100",
    "categories": ["Linen"],
    "address": {"city": "Lisbon", "country": "PT"},
    "is_active": True,
}


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


class SupplierClientTest(unittest.TestCase):
    def _client(self, *responses):
        self.api = StubApi(*responses)
        self.notifier = Notifier()
        return SupplierClient(api=self.api, notifier=self.notifier, page_size=20)

    def test_get_suppliers_query_and_state(self):
        client = self._client(
            _ok([LINEN_CO], total=7, pagination={"page": 1, "limit": 20, "totalPages": 1})
        )
        suppliers = client.get_suppliers(search="linen", is_active=True)

        self.assertEqual(
            self.api.calls[0]["params"],
            [("page", 1), ("limit", 20), ("sort", "name"), ("search", "linen"), ("isActive", "true")],
        )
        self.assertEqual(suppliers[0].address.city, "Lisbon")
        self.assertEqual(client.suppliers, suppliers)
        self.assertEqual(client.total_suppliers, 7)

    def test_get_supplier_and_items(self):
        client = self._client(
            _ok(LINEN_CO),
            _ok([{"_id": "item-1", "name": "Bath towel", "currentStock": 40}]),
        )
        supplier = client.get_supplier_by_id("sup-1")
        items = client.get_supplier_items("sup-1")

        self.assertEqual(client.supplier, supplier)
        self.assertEqual(self.api.calls[1]["endpoint"], "/suppliers/sup-1/items")
        self.assertEqual(items[0].current_stock, 40)
        self.assertEqual(client.supplier_items, items)

    def test_failure_falls_back_to_default_message(self):
        client = self._client(ApiResponse(error="", status=500))
        self.assertIsNone(client.get_supplier_by_id("sup-1"))
        self.assertEqual(client.error, "Failed to fetch supplier")

    def test_create_update_delete(self):
        client = self._client(
            _ok(LINEN_CO),
            _ok(dict(LINEN_CO, phone="+1 555 0199")),
            _ok({}, message="Supplier deactivated"),
        )
        client.create_supplier(SupplierPayload(name="Linen Co", categories=["Linen"]))
        updated = client.update_supplier("sup-1", {"phone": "+1 555 0199"})
        deleted = client.delete_supplier("sup-1")

        self.assertEqual(self.api.calls[0]["data"], {"name": "Linen Co", "categories": ["Linen"]})
        self.assertEqual([c["method"] for c in self.api.calls], ["POST", "PUT", "DELETE"])
        self.assertEqual(updated.phone, "+1 555 0199")
        self.assertTrue(deleted)
        self.assertEqual(
            self.notifier.messages(LEVEL_SUCCESS),
            ["Supplier created successfully", "Supplier updated successfully", "Supplier deactivated"],
        )


if __name__ == "__main__":
    unittest.main()
