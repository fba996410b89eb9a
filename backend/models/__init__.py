from models.pharmacy import Pharmacy, Credential
from models.admin import SystemAdmin
from models.catalog import CatalogDrug, PendingItem
from models.inventory import InventoryOffer, InventoryRequest
from models.archive import SalesArchive
from models.rating import Rating
from models.legal import LegalContent
from models.log import Log

__all__ = [
    "Pharmacy", "Credential", "SystemAdmin", "CatalogDrug", "PendingItem",
    "InventoryOffer", "InventoryRequest", "SalesArchive", "Rating", "LegalContent", "Log",
]
