from datetime import date, timedelta

from models.archive import SalesArchive
from models.inventory import InventoryOffer


def test_add_offer_normalises_input(client, make_pharmacy, catalog):
    member = make_pharmacy()
    drug = catalog[0]
    r = client.post("/webhook/add-offer", headers=member["headers"], json={"payload": {
        "pharmacy_id": member["id"], "drug_id": drug["id"], "english_name": drug["english_name"],
        "arabic_name": drug["arabic_name"], "barcode": " 622-1000 000001 ",
        "expiry_date": "2027-05", "quantity": 3, "price": 40, "discount": 10,
    }})
    assert r.status_code == 201, r.text
    offer = r.json()
    assert offer["barcode"] == "6221000000001"
    assert offer["expiry_date"] == "2027-05-01"
    assert offer["pharmacy_id"] == member["id"]


def test_add_offer_rejects_bad_values(client, make_pharmacy, catalog):
    member = make_pharmacy()
    base = {"pharmacy_id": member["id"], "barcode": "6221000000001", "expiry_date": "2027-05-01",
            "quantity": 1, "price": 10, "discount": 0}

    for change in ({"barcode": "0000"}, {"expiry_date": "05/2027"}):
        r = client.post("/webhook/add-offer", headers=member["headers"], json={"payload": {**base, **change}})
        assert r.status_code == 400, change

    for change in ({"quantity": 0}, {"price": 0}, {"discount": 101}):
        r = client.post("/webhook/add-offer", headers=member["headers"], json={"payload": {**base, **change}})
        assert r.status_code == 422, change


def test_cannot_add_for_another_pharmacy(client, make_pharmacy, catalog):
    a = make_pharmacy()
    b = make_pharmacy()
    r = client.post("/webhook/add-request", headers=a["headers"], json={"payload": {
        "pharmacy_id": b["id"], "barcode": catalog[0]["barcode"], "quantity": 2,
    }})
    assert r.status_code == 403


def test_own_offers_newest_first_with_near_expiry(client, make_pharmacy, catalog, add_offer):
    member = make_pharmacy()
    soon = (date.today() + timedelta(days=30)).isoformat()
    first = add_offer(member, catalog[0], expiry="2030-01-01")
    second = add_offer(member, catalog[1], expiry=soon)

    items = client.get("/offers/mine", headers=member["headers"]).json()
    assert [i["id"] for i in items] == [second["id"], first["id"]]
    assert items[0]["is_near_expiry"] is True
    assert items[1]["is_near_expiry"] is False


def test_full_cancel_archives_everything(client, db, make_pharmacy, catalog, add_offer):
    member = make_pharmacy()
    offer = add_offer(member, catalog[0], quantity=7)

    r = client.post(f"/offers/{offer['id']}/archive", headers=member["headers"],
                    json={"action_type": "Internal Sale"})
    assert r.status_code == 200
    body = r.json()
    assert body["retired"] is True
    assert body["remaining_quantity"] == 0
    assert body["archive"]["quantity"] == 7
    assert body["archive"]["action_type"] == "Internal Sale"
    assert body["archive"]["price"] == 40.0

    assert db.query(InventoryOffer).count() == 0
    record = db.query(SalesArchive).one()
    assert (record.pharmacy_id, record.item_id, record.item_kind) == (member["id"], offer["id"], "offer")


def test_partial_deduct_then_exact_remainder(client, db, make_pharmacy, catalog, add_offer):
    member = make_pharmacy()
    offer = add_offer(member, catalog[0], quantity=10)
    url = f"/offers/{offer['id']}/archive"

    r = client.post(url, headers=member["headers"], json={"action_type": "Transfer", "quantity": 4})
    assert r.json()["remaining_quantity"] == 6
    assert r.json()["retired"] is False

    r = client.post(url, headers=member["headers"], json={"action_type": "Transfer", "quantity": 7})
    assert r.status_code == 400

    r = client.post(url, headers=member["headers"], json={"action_type": "Transfer", "quantity": 6})
    assert r.json()["retired"] is True
    assert [a.quantity for a in db.query(SalesArchive).order_by(SalesArchive.id)] == [4, 6]


def test_archive_rejects_unknown_label(client, make_pharmacy, catalog, add_offer, add_request):
    member = make_pharmacy()
    offer = add_offer(member, catalog[0])
    request = add_request(member, catalog[1])

    r = client.post(f"/offers/{offer['id']}/archive", headers=member["headers"], json={"action_type": "Purchased"})
    assert r.status_code == 400
    r = client.post(f"/requests/{request['id']}/archive", headers=member["headers"],
                    json={"action_type": "تم الشراء"})
    assert r.status_code == 200


def test_expected_quantity_mismatch_conflicts(client, db, make_pharmacy, catalog, add_offer):
    member = make_pharmacy()
    offer = add_offer(member, catalog[0], quantity=10)

    r = client.post(f"/offers/{offer['id']}/archive", headers=member["headers"],
                    json={"action_type": "Transfer", "quantity": 2, "expected_quantity": 9})
    assert r.status_code == 409
    assert db.query(SalesArchive).count() == 0
    assert db.query(InventoryOffer).one().quantity == 10


def test_only_owner_can_archive_or_restock(client, make_pharmacy, catalog, add_offer):
    owner = make_pharmacy()
    other = make_pharmacy()
    offer = add_offer(owner, catalog[0])

    r = client.post(f"/offers/{offer['id']}/archive", headers=other["headers"], json={"action_type": "Transfer"})
    assert r.status_code == 403
    r = client.post(f"/offers/{offer['id']}/restock", headers=other["headers"], json={"quantity": 2})
    assert r.status_code == 403
    r = client.post("/offers/9999/archive", headers=owner["headers"], json={"action_type": "Transfer"})
    assert r.status_code == 404


def test_restock_and_edit_do_not_archive(client, db, make_pharmacy, catalog, add_offer, add_request):
    member = make_pharmacy()
    offer = add_offer(member, catalog[0], quantity=5)
    request = add_request(member, catalog[1], quantity=2)

    r = client.post(f"/offers/{offer['id']}/restock", headers=member["headers"], json={"quantity": 3})
    assert r.json()["quantity"] == 8
    r = client.patch(f"/offers/{offer['id']}", headers=member["headers"], json={"price": 55.5, "discount": 30})
    assert (r.json()["price"], r.json()["discount"]) == (55.5, 30)
    r = client.patch(f"/requests/{request['id']}", headers=member["headers"], json={"quantity": 9})
    assert r.json()["quantity"] == 9
    r = client.post(f"/requests/{request['id']}/restock", headers=member["headers"], json={"quantity": 1})
    assert r.json()["quantity"] == 10

    assert db.query(SalesArchive).count() == 0
