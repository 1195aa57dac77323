import argparse

from hotel_inventory.core.constants import NEW_ITEM_ID, TRANSACTION_TYPES
from hotel_inventory.core.logging import setup_logging
from hotel_inventory.schemas.inventory import InventoryItemPayload
from hotel_inventory.services.inventory_client import InventoryClient
from hotel_inventory.services.supplier_client import SupplierClient


def _qty(value):
    if value is None:
        return "--"
    return "{:g}".format(value)


def _add_item_fields(parser, require_name=False):
    parser.add_argument("--name", required=require_name)
    parser.add_argument("--description")
    parser.add_argument("--category")
    parser.add_argument("--sku")
    parser.add_argument("--unit")
    parser.add_argument("--unit-price", type=float)
    parser.add_argument("--current-stock", type=float)
    parser.add_argument("--min-stock", type=float)
    parser.add_argument("--max-stock", type=float)
    parser.add_argument("--reorder-point", type=float)
    parser.add_argument("--reorder-quantity", type=float)
    parser.add_argument("--location")
    parser.add_argument("--supplier", help="Supplier id.")
    parser.add_argument("--perishable", dest="is_perishable", action="store_true", default=None)
    active = parser.add_mutually_exclusive_group()
    active.add_argument("--active", dest="is_active", action="store_true", default=None)
    active.add_argument("--inactive", dest="is_active", action="store_false")


def build_parser():
    parser = argparse.ArgumentParser(description="Hotel inventory and stock operations.")
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL.")
    commands = parser.add_subparsers(dest="command", required=True)

    list_cmd = commands.add_parser("list", help="List inventory items.")
    list_cmd.add_argument("--page", type=int, default=1)
    list_cmd.add_argument("--limit", type=int, default=None)
    list_cmd.add_argument("--search", default="")
    list_cmd.add_argument("--category", default="")
    list_cmd.add_argument("--supplier", default="")
    list_cmd.add_argument("--stock-status", default="")
    active = list_cmd.add_mutually_exclusive_group()
    active.add_argument("--active", dest="is_active", action="store_true", default="")
    active.add_argument("--inactive", dest="is_active", action="store_false")

    show_cmd = commands.add_parser("show", help="Show one item.")
    show_cmd.add_argument("item_id")

    create_cmd = commands.add_parser("create", help="Create an item.")
    _add_item_fields(create_cmd, require_name=True)

    update_cmd = commands.add_parser("update", help="Update an item.")
    update_cmd.add_argument("item_id")
    _add_item_fields(update_cmd)

    delete_cmd = commands.add_parser("delete", help="Delete an item.")
    delete_cmd.add_argument("item_id")

    tx_cmd = commands.add_parser("transactions", help="Stock transaction history for an item.")
    tx_cmd.add_argument("item_id")
    tx_cmd.add_argument("--page", type=int, default=1)
    tx_cmd.add_argument("--limit", type=int, default=None)
    tx_cmd.add_argument("--start-date")
    tx_cmd.add_argument("--end-date")
    tx_cmd.add_argument("--type", choices=TRANSACTION_TYPES)

    adjust_cmd = commands.add_parser("adjust", help="Record one stock movement.")
    adjust_cmd.add_argument("item_id")
    adjust_cmd.add_argument("--quantity", type=float, required=True)
    adjust_cmd.add_argument("--type", required=True, help="restock, use, transfer, adjustment, waste, return")
    adjust_cmd.add_argument("--reason")
    adjust_cmd.add_argument("--unit-price", type=float)
    adjust_cmd.add_argument("--department")
    adjust_cmd.add_argument("--reference", dest="reference_number")
    adjust_cmd.add_argument("--date", dest="transaction_date", help="ISO-8601 timestamp. Default: now.")

    transfer_cmd = commands.add_parser("transfer", help="Move stock from one item to another.")
    transfer_cmd.add_argument("from_item_id")
    transfer_cmd.add_argument("to_item_id")
    transfer_cmd.add_argument("--quantity", type=float, required=True)
    transfer_cmd.add_argument("--reason")
    transfer_cmd.add_argument("--department")

    dept_cmd = commands.add_parser("transfer-department", help="Issue stock to a department.")
    dept_cmd.add_argument("item_id")
    dept_cmd.add_argument("--department", required=True)
    dept_cmd.add_argument("--quantity", type=float, required=True)
    dept_cmd.add_argument("--reason")

    commands.add_parser("low-stock", help="Items at or below their reorder threshold.")
    commands.add_parser("stats", help="Inventory statistics.")
    commands.add_parser("reference", help="Categories, units, locations and departments.")

    suppliers_cmd = commands.add_parser("suppliers", help="List suppliers.")
    suppliers_cmd.add_argument("--search")
    suppliers_cmd.add_argument("--category")

    supplier_items_cmd = commands.add_parser("supplier-items", help="Items supplied by a supplier.")
    supplier_items_cmd.add_argument("supplier_id")

    return parser


def _item_payload(args):
    return InventoryItemPayload(
        name=args.name,
        description=args.description,
        category=args.category,
        sku=args.sku,
        unit=args.unit,
        unit_price=args.unit_price,
        current_stock=args.current_stock,
        min_stock_level=args.min_stock,
        max_stock_level=args.max_stock,
        reorder_point=args.reorder_point,
        reorder_quantity=args.reorder_quantity,
        location=args.location,
        supplier=args.supplier,
        is_perishable=args.is_perishable,
        is_active=args.is_active,
    )


def _print_item_row(item):
    flag = " LOW" if item.is_low_stock else ""
    print(
        f"{item.id}  {item.name}  [{item.category or '--'}]  "
        f"{_qty(item.current_stock)} {item.unit or ''}{flag}"
    )


def _print_item(item):
    print(f"{item.name} ({item.id})")
    print(f"  SKU: {item.sku or '--'}  Category: {item.category or '--'}  Location: {item.location or '--'}")
    print(f"  Stock: {_qty(item.current_stock)} {item.unit or ''}  Status: {item.stock_status or '--'}")
    print(
        f"  Min: {_qty(item.min_stock_level)}  Max: {_qty(item.max_stock_level)}  "
        f"Reorder point: {_qty(item.reorder_point)}  Reorder qty: {_qty(item.reorder_quantity)}"
    )
    print(f"  Unit price: {item.unit_price:.2f}  Supplier: {item.supplier_id or '--'}")
    print(f"  Active: {'yes' if item.is_active else 'no'}  Perishable: {'yes' if item.is_perishable else 'no'}")


def _fail(client, action):
    raise SystemExit(f"{action} failed: {client.error or 'item not found'}")


def run_command(args, client, supplier_client):
    command = args.command

    if command == "list":
        page = client.fetch_inventory_items(
            page=args.page,
            limit=args.limit,
            search=args.search,
            category=args.category,
            supplier=args.supplier,
            stock_status=args.stock_status,
            is_active=args.is_active,
        )
        if page is None:
            _fail(client, "List")
        for item in page.items:
            _print_item_row(item)
        print(f"Page {page.pagination.page}/{page.pagination.total_pages}, {page.total} items")

    elif command == "show":
        if args.item_id == NEW_ITEM_ID:
            raise SystemExit(f"\"{NEW_ITEM_ID}\" is not an item id; use the create command")
        item = client.get_inventory_item_by_id(args.item_id)
        if item is None:
            _fail(client, "Lookup")
        _print_item(item)

    elif command == "create":
        item = client.create_inventory_item(_item_payload(args))
        if item is None:
            _fail(client, "Create")
        print(f"Created {item.name} ({item.id})")

    elif command == "update":
        item = client.update_inventory_item(args.item_id, _item_payload(args))
        if item is None:
            _fail(client, "Update")
        print(f"Updated {item.name} ({item.id})")

    elif command == "delete":
        if not client.delete_inventory_item(args.item_id):
            _fail(client, "Delete")
        print(f"Deleted {args.item_id}")

    elif command == "transactions":
        history = client.get_item_transactions(
            args.item_id,
            page=args.page,
            limit=args.limit,
            start_date=args.start_date,
            end_date=args.end_date,
            type=args.type,
        )
        if history is None:
            _fail(client, "Transaction lookup")
        for tx in history.transactions:
            when = tx.transaction_date.isoformat() if tx.transaction_date else "--"
            print(f"{when}  {tx.type:<10} {_qty(tx.quantity):>8}  {tx.status}  {tx.reason or ''}")
        print(f"Page {history.pagination.page}/{history.pagination.total_pages}, {history.total} transactions")

    elif command == "adjust":
        result = client.update_stock_level(
            args.item_id,
            {
                "quantity": args.quantity,
                "type": args.type,
                "reason": args.reason,
                "unit_price": args.unit_price,
                "department": args.department,
                "reference_number": args.reference_number,
                "transaction_date": args.transaction_date,
            },
        )
        if result is None:
            _fail(client, "Stock update")
        print(f"Stock now {_qty(result.current_stock)} ({result.stock_status or '--'})")

    elif command == "transfer":
        if args.quantity <= 0:
            raise SystemExit("Quantity must be greater than zero")
        source = client.get_inventory_item_by_id(args.from_item_id)
        if source is None:
            _fail(client, "Lookup")
        if args.quantity > source.current_stock:
            available = " ".join(part for part in (_qty(source.current_stock), source.unit) if part)
            raise SystemExit(f"Cannot transfer more than available stock ({available})")
        result = client.transfer_stock(
            args.from_item_id,
            args.to_item_id,
            args.quantity,
            reason=args.reason,
            department=args.department,
        )
        if result is None:
            _fail(client, "Transfer")
        print(
            f"Transferred {_qty(args.quantity)} from {args.from_item_id} "
            f"(now {_qty(result.source.current_stock)}) to {args.to_item_id} "
            f"(now {_qty(result.destination.current_stock)})"
        )

    elif command == "transfer-department":
        if args.quantity <= 0:
            raise SystemExit("Quantity must be greater than zero")
        result = client.transfer_stock_to_department(
            args.item_id, args.quantity, args.department, reason=args.reason
        )
        if result is None:
            _fail(client, "Transfer")
        print(f"Issued {_qty(args.quantity)} to {args.department}; stock now {_qty(result.current_stock)}")

    elif command == "low-stock":
        items = client.fetch_low_stock_items()
        if items is None:
            _fail(client, "Low-stock lookup")
        if not items:
            print("No items below their reorder threshold.")
        for item in items:
            print(
                f"{item.id}  {item.name}  {_qty(item.current_stock)} {item.unit or ''} "
                f"(reorder at {_qty(item.reorder_threshold)})"
            )

    elif command == "stats":
        stats = client.fetch_inventory_stats()
        if stats is None:
            _fail(client, "Stats lookup")
        print(f"Items: {stats.total_items} ({stats.active_items} active)")
        print(f"Total value: {stats.total_value:.2f}")
        for category in stats.category_stats:
            print(f"  {category.id or 'Uncategorised'}: {category.count} items, {category.value:.2f}")
        for status in stats.stock_status:
            print(f"  {status.id or 'unknown'}: {status.count}")

    elif command == "reference":
        print("Categories: " + ", ".join(client.get_inventory_categories()))
        print("Units: " + ", ".join(client.get_inventory_units()))
        print("Locations: " + ", ".join(client.get_inventory_locations()))
        print("Departments: " + ", ".join(client.get_inventory_departments()))

    elif command == "suppliers":
        suppliers = supplier_client.get_suppliers(search=args.search, category=args.category)
        if suppliers is None:
            _fail(supplier_client, "Supplier lookup")
        for supplier in suppliers:
            print(f"{supplier.id}  {supplier.name}  {supplier.contact_person or '--'}  {supplier.phone or '--'}")
        print(f"{supplier_client.total_suppliers} suppliers")

    elif command == "supplier-items":
        items = supplier_client.get_supplier_items(args.supplier_id)
        if items is None:
            _fail(supplier_client, "Supplier item lookup")
        for item in items:
            _print_item_row(item)


def main(argv=None, client=None, supplier_client=None):
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    try:
        client = client or InventoryClient()
        supplier_client = supplier_client or SupplierClient(api=client.api, notifier=client.notifier)
        run_command(args, client, supplier_client)
    except (RuntimeError, ValueError) as exc:
        raise SystemExit(f"Error: {exc}") from exc


if __name__ == "__main__":
    main()
