# backend/utils/archival.py
"""Moving inventory quantity into the sales archive.

Every operation here runs as one unit of work: the source row is locked,
the archive row is inserted and the source row is decremented or deleted
before a single commit. A failure anywhere rolls the whole thing back, so
callers never observe an archive row without the matching decrement.
"""
import logging
from typing import Optional, Union

from sqlalchemy.orm import Session

from models.archive import (
    SalesArchive,
    OFFER_OWNER_ACTIONS,
    REQUEST_OWNER_ACTIONS,
    MARKETPLACE_SALE,
    MARKETPLACE_REQUEST_FILLED,
)
from models.inventory import InventoryOffer, InventoryRequest
from utils.errors import Conflict, Forbidden, NotFound, ValidationFailed

logger = logging.getLogger(__name__)

KIND_OFFER = "offer"
KIND_REQUEST = "request"

Item = Union[InventoryOffer, InventoryRequest]

_MODELS = {KIND_OFFER: InventoryOffer, KIND_REQUEST: InventoryRequest}
_OWNER_ACTIONS = {KIND_OFFER: OFFER_OWNER_ACTIONS, KIND_REQUEST: REQUEST_OWNER_ACTIONS}
_MARKET_LABELS = {KIND_OFFER: MARKETPLACE_SALE, KIND_REQUEST: MARKETPLACE_REQUEST_FILLED}


def model_for(kind: str):
    try:
        return _MODELS[kind]
    except KeyError:
        raise NotFound(f"Unknown item kind: {kind}")


def lock_item(db: Session, kind: str, item_id: int) -> Item:
    model = model_for(kind)
    item = db.query(model).filter(model.id == item_id).with_for_update(of=model).first()
    if item is None:
        raise NotFound(f"{kind.capitalize()} not found")
    return item


def _check_expected(item: Item, expected_quantity: Optional[int]) -> None:
    if expected_quantity is not None and expected_quantity != item.quantity:
        raise Conflict(
            f"Quantity changed to {item.quantity} since it was loaded; refresh and try again"
        )


def _archive_row(item: Item, kind: str, quantity: int, action_type: str,
                 counterparty_pharmacy_id: Optional[int] = None) -> SalesArchive:
    return SalesArchive(
        pharmacy_id=item.pharmacy_id,
        item_id=item.id,
        item_kind=kind,
        arabic_name=item.arabic_name,
        english_name=item.english_name,
        barcode=item.barcode,
        quantity=quantity,
        price=getattr(item, "price", None),
        discount=getattr(item, "discount", None),
        action_type=action_type,
        counterparty_pharmacy_id=counterparty_pharmacy_id,
    )


def _consume(db: Session, item: Item, kind: str, quantity: Optional[int], action_type: str,
             counterparty_pharmacy_id: Optional[int] = None) -> dict:
    # No quantity means the whole remaining stock
    amount = item.quantity if quantity is None else quantity
    if amount <= 0:
        raise ValidationFailed("Quantity must be greater than zero")
    if amount > item.quantity:
        raise ValidationFailed(f"Quantity exceeds the available {item.quantity}")

    record = _archive_row(item, kind, amount, action_type, counterparty_pharmacy_id)
    item_id = item.id
    remaining = item.quantity - amount
    try:
        db.add(record)
        if remaining == 0:
            db.delete(item)
        else:
            item.quantity = remaining
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("Archiving %s %s failed", kind, item_id)
        raise
    db.refresh(record)

    return {
        "archive": record,
        "item_id": item_id,
        "remaining_quantity": remaining,
        "retired": remaining == 0,
    }


def archive_own_item(db: Session, kind: str, item_id: int, pharmacy_id: int, action_type: str,
                     quantity: Optional[int] = None, expected_quantity: Optional[int] = None) -> dict:
    """Owner retires an item fully (quantity None) or deducts part of it."""
    if action_type not in _OWNER_ACTIONS[kind]:
        raise ValidationFailed(f"Unsupported action type for {kind}: {action_type}")

    item = lock_item(db, kind, item_id)
    if item.pharmacy_id != pharmacy_id:
        raise Forbidden("Only the listing pharmacy can archive this item")
    _check_expected(item, expected_quantity)
    return _consume(db, item, kind, quantity, action_type)


def marketplace_transaction(db: Session, kind: str, item_id: int, buyer_pharmacy_id: int,
                            quantity: int, expected_quantity: Optional[int] = None) -> dict:
    """A counterparty takes some or all of another pharmacy's listing."""
    item = lock_item(db, kind, item_id)
    if item.pharmacy_id == buyer_pharmacy_id:
        raise ValidationFailed("You cannot transact with your own listing")
    _check_expected(item, expected_quantity)

    owner_id = item.pharmacy_id
    result = _consume(db, item, kind, quantity, _MARKET_LABELS[kind], counterparty_pharmacy_id=buyer_pharmacy_id)
    result["owner_pharmacy_id"] = owner_id
    return result


def restock_item(db: Session, kind: str, item_id: int, pharmacy_id: int, quantity: int) -> Item:
    if quantity < 1:
        raise ValidationFailed("Restock quantity must be at least 1")

    item = lock_item(db, kind, item_id)
    if item.pharmacy_id != pharmacy_id:
        raise Forbidden("Only the listing pharmacy can restock this item")

    item.quantity = item.quantity + quantity
    db.commit()
    db.refresh(item)
    return item
