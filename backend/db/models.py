"""All ORM models, imported together so relationship() names resolve."""
from db.store import Store
from db.users import User
from db.permission import Permission
from db.category import Category
from db.vendor import Vendor
from db.item import Item
from db.location import Location
from db.stocktake import Stocktake

__all__ = [
    "Store",
    "User",
    "Permission",
    "Category",
    "Vendor",
    "Item",
    "Location",
    "Stocktake",
]
