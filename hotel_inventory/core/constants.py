NEW_ITEM_ID = "new"

DEFAULT_API_URL = "http://localhost:5000/api"
DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 20

TRANSACTION_TYPES = ("restock", "use", "transfer", "adjustment", "waste", "return")
TRANSACTION_STATUSES = ("pending", "completed", "cancelled")

INVENTORY_CATEGORIES = (
    "Food",
    "Beverage",
    "Cleaning",
    "Toiletries",
    "Linen",
    "Office",
    "Maintenance",
    "Equipment",
    "Furniture",
    "Other",
)

INVENTORY_UNITS = ("piece", "kg", "g", "l", "ml", "box", "carton", "pack", "set", "pair", "other")

INVENTORY_LOCATIONS = (
    "Main Storage",
    "Kitchen",
    "Bar",
    "Housekeeping",
    "Maintenance",
    "Front Desk",
    "Restaurant",
    "Spa",
    "Gym",
    "Other",
)

INVENTORY_DEPARTMENTS = (
    "Kitchen",
    "Housekeeping",
    "Maintenance",
    "Front Desk",
    "Restaurant",
    "Bar",
    "Spa",
    "Gym",
    "Administration",
    "Other",
)
