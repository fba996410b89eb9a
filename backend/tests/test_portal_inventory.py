import asyncio

from models.archive import SalesArchive
from models.inventory import InventoryOffer
from portal.inventory import (
    InventoryBoard, ADDED, ARCHIVED, DUPLICATE_WARNING, PROFILE_FIRST, normalize_barcode, normalize_expiry,
)
from portal.notify import GENERIC_ERROR


def test_normalisers():
    assert normalize_barcode("622-100 0000001") == "6221000000001"
    assert normalize_barcode("000") is None
    assert normalize_expiry("2026-05") == "2026-05-01"
    assert normalize_expiry("2026-05-17") == "2026-05-17"
    assert normalize_expiry("May 2026") is None


def _run(api, coro_factory):
    async def scenario():
        try:
            return await coro_factory()
        finally:
            await api.aclose()
    return asyncio.run(scenario())


def test_add_offer_through_workflow(portal, make_pharmacy, catalog):
    member = make_pharmacy()
    api, session, notifier, transport = portal(member)
    board = InventoryBoard(api, session, notifier)

    ok = _run(api, lambda: board.add(catalog[0], 5, expiry="2027-02", price=30, discount=15))
    assert ok is True
    assert notifier.last.message == ADDED
    assert board.draft is None
    assert [(i["quantity"], i["expiry_date"]) for i in board.items] == [(5, "2027-02-01")]
    assert ("POST", "/webhook/add-offer") in transport.calls


def test_validation_blocks_network(portal, make_pharmacy, catalog):
    member = make_pharmacy()
    api, session, notifier, transport = portal(member)
    board = InventoryBoard(api, session, notifier)

    async def attempts():
        results = [
            await board.add(None, 5, expiry="2027-02", price=30),
            await board.add({**catalog[0], "barcode": "0"}, 5, expiry="2027-02", price=30),
            await board.add(catalog[0], 0, expiry="2027-02", price=30),
            await board.add(catalog[0], 5, expiry="02/2027", price=30),
            await board.add(catalog[0], 5, expiry="2027-02", price=0),
            await board.add(catalog[0], 5, expiry="2027-02", price=30, discount=120),
            await board.add(catalog[0], 5, expiry="2027-02", price="abc"),
            await board.add(catalog[0], 5, expiry="2027-02", price=30, discount="lots"),
            await board.add(catalog[0], True, expiry="2027-02", price=30),
        ]
        return results

    assert _run(api, attempts) == [False] * 9
    assert notifier.notices[6].message == "Price must be greater than zero"
    assert notifier.notices[7].message == "Discount must be between 0 and 100"
    assert notifier.notices[8].message == "Quantity must be at least 1"
    assert transport.calls == []
    assert all(n.level == "error" for n in notifier.notices)


def test_add_requires_completed_profile(portal, make_pharmacy, catalog):
    member = make_pharmacy()
    api, session, notifier, transport = portal(member)
    session.set("pharmacy_profile", None)
    board = InventoryBoard(api, session, notifier)

    assert _run(api, lambda: board.add(catalog[0], 5, expiry="2027-02", price=30)) is False
    assert notifier.last.message == PROFILE_FIRST
    assert transport.calls == []


def test_duplicate_offer_needs_confirmation(portal, make_pharmacy, catalog, add_offer):
    member = make_pharmacy()
    add_offer(member, catalog[0], expiry="2027-02-01")
    api, session, notifier, transport = portal(member)
    asked = []

    def decline(message):
        asked.append(message)
        return False

    board = InventoryBoard(api, session, notifier, confirm=decline)

    async def scenario():
        await board.refresh()
        calls = len(transport.calls)
        ok = await board.add(catalog[0], 3, expiry="2027-02", price=30)
        return ok, calls

    ok, calls = _run(api, scenario)
    assert ok is False
    assert asked == [DUPLICATE_WARNING]
    assert len(transport.calls) == calls


def test_failed_submission_keeps_draft(portal, make_pharmacy, admin_headers, client, catalog):
    member = make_pharmacy()
    api, session, notifier, transport = portal(member)
    # Suspended after login: the server refuses the write
    client.post(f"/admin/pharmacies/{member['id']}/toggle-status", headers=admin_headers)
    board = InventoryBoard(api, session, notifier)

    ok = _run(api, lambda: board.add(catalog[0], 5, expiry="2027-02", price=30))
    assert ok is False
    assert notifier.last.message == GENERIC_ERROR
    assert board.draft["quantity"] == 5


def test_full_cancel_archives_whole_quantity(portal, db, make_pharmacy, catalog, add_offer):
    member = make_pharmacy()
    offer = add_offer(member, catalog[0], quantity=12)
    api, session, notifier, transport = portal(member)
    board = InventoryBoard(api, session, notifier)

    async def scenario():
        await board.refresh()
        return await board.full_cancel(offer["id"], "Internal Sale")

    assert _run(api, scenario) is True
    assert board.items == []
    assert notifier.last.message == ARCHIVED

    record = db.query(SalesArchive).one()
    assert (record.quantity, record.action_type, record.pharmacy_id) == (12, "Internal Sale", member["id"])
    assert db.query(InventoryOffer).count() == 0


def test_full_cancel_refetches_when_refused(portal, make_pharmacy, catalog, add_offer):
    member = make_pharmacy()
    offer = add_offer(member, catalog[0], quantity=12)
    api, session, notifier, transport = portal(member)
    board = InventoryBoard(api, session, notifier)

    async def scenario():
        await board.refresh()
        # Request-only label: the server answers 400
        return await board.full_cancel(offer["id"], "Purchased")

    assert _run(api, scenario) is False
    assert [i["id"] for i in board.items] == [offer["id"]]
    assert notifier.last.level == "error"


def test_partial_deduct(portal, db, make_pharmacy, catalog, add_offer):
    member = make_pharmacy()
    offer = add_offer(member, catalog[0], quantity=10)
    api, session, notifier, transport = portal(member)
    board = InventoryBoard(api, session, notifier)

    async def scenario():
        await board.refresh()
        ok = await board.deduct(offer["id"], 3, "Transfer")
        calls = len(transport.calls)
        too_many = await board.deduct(offer["id"], 8, "Transfer")
        zero = await board.deduct(offer["id"], 0, "Transfer")
        return ok, too_many, zero, calls

    ok, too_many, zero, calls = _run(api, scenario)
    assert (ok, too_many, zero) == (True, False, False)
    assert len(transport.calls) == calls
    assert [i["quantity"] for i in board.items] == [7]
    assert [a.quantity for a in db.query(SalesArchive)] == [3]


def test_restock_and_edit(portal, make_pharmacy, catalog, add_offer, add_request):
    member = make_pharmacy()
    offer = add_offer(member, catalog[0], quantity=2)
    api, session, notifier, transport = portal(member)
    offers = InventoryBoard(api, session, notifier)
    requests = InventoryBoard(api, session, notifier, kind="request")
    item = add_request(member, catalog[1], quantity=1)

    async def scenario():
        await offers.restock(offer["id"], 5)
        await offers.edit(offer["id"], discount=35)
        await requests.edit(item["id"], quantity=4)
        bad = await offers.restock(offer["id"], 0)
        return bad

    assert _run(api, scenario) is False
    assert (offers.items[0]["quantity"], offers.items[0]["discount"]) == (7, 35)
    assert requests.items[0]["quantity"] == 4
