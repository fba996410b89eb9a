import asyncio

from models.archive import SalesArchive
from portal.ratings import RatingPrompt, ALREADY_RATED, CHOOSE_STARS, RATED
from utils.reputation import is_verified


def test_verified_boundary():
    assert is_verified(4.0, 5) is True
    assert is_verified(3.99, 5) is False
    assert is_verified(4.0, 4) is False
    assert is_verified(None, 50) is False


def _archive_rows(db, pharmacy_id, count, buyers=()):
    # Row i is item i; the first len(buyers) rows were taken by those buyers
    db.add_all([
        SalesArchive(pharmacy_id=pharmacy_id, item_id=i, item_kind="offer", quantity=1,
                     action_type="Marketplace Sale" if i < len(buyers) else "Internal Sale",
                     counterparty_pharmacy_id=buyers[i] if i < len(buyers) else None)
        for i in range(count)
    ])
    db.commit()


def test_rating_rules(client, db, make_pharmacy):
    rater = make_pharmacy()
    rated = make_pharmacy()
    _archive_rows(db, rated["id"], 8, buyers=[rater["id"]] * 8)
    body = {"to_pharmacy_id": rated["id"], "related_item_id": 7, "stars": 5, "comment": " fast "}

    r = client.post("/ratings", headers=rater["headers"], json=body)
    assert r.status_code == 201
    assert r.json()["comment"] == "fast"

    r = client.post("/ratings", headers=rater["headers"], json=body)
    assert r.status_code == 409

    r = client.post("/ratings", headers=rater["headers"], json={**body, "related_item_id": 6, "stars": 6})
    assert r.status_code == 422

    r = client.post("/ratings", headers=rater["headers"], json={**body, "to_pharmacy_id": rater["id"]})
    assert r.status_code == 400

    r = client.post("/ratings", headers=rater["headers"], json={**body, "to_pharmacy_id": 42})
    assert r.status_code == 404

    received = client.get("/ratings/received", headers=rated["headers"]).json()
    assert [x["stars"] for x in received] == [5]


def test_rating_needs_completed_exchange(client, db, make_pharmacy):
    rater = make_pharmacy()
    rated = make_pharmacy()
    outsider = make_pharmacy()
    _archive_rows(db, rated["id"], 2, buyers=[rater["id"]])

    # Item 1 was archived without a counterparty
    r = client.post("/ratings", headers=rater["headers"],
                    json={"to_pharmacy_id": rated["id"], "related_item_id": 1, "stars": 5})
    assert r.status_code == 403

    r = client.post("/ratings", headers=outsider["headers"],
                    json={"to_pharmacy_id": rated["id"], "related_item_id": 0, "stars": 5})
    assert r.status_code == 403

    r = client.post("/ratings", headers=rater["headers"],
                    json={"to_pharmacy_id": rated["id"], "related_item_id": 0, "stars": 5})
    assert r.status_code == 201


def test_duplicate_rating_reports_success_twice(portal, db, make_pharmacy):
    rater = make_pharmacy()
    rated = make_pharmacy(name="Rated Pharmacy")
    _archive_rows(db, rated["id"], 12, buyers=[rater["id"]] * 12)
    api, session, notifier, transport = portal(rater)

    async def scenario():
        first = RatingPrompt(api, notifier, rated["id"], related_item_id=11, pharmacy_name="Rated Pharmacy")
        second = RatingPrompt(api, notifier, rated["id"], related_item_id=11)
        results = (await first.submit(4, "ok"), await second.submit(4))
        await api.aclose()
        return results

    assert asyncio.run(scenario()) == (True, True)
    assert [(n.level, n.message) for n in notifier.notices] == [("success", RATED), ("success", ALREADY_RATED)]


def test_rating_without_stars_makes_no_call(portal, make_pharmacy):
    rater = make_pharmacy()
    api, session, notifier, transport = portal(rater)

    async def scenario():
        ok = await RatingPrompt(api, notifier, 1, related_item_id=1).submit(0)
        await api.aclose()
        return ok

    assert asyncio.run(scenario()) is False
    assert transport.calls == []
    assert notifier.last.message == CHOOSE_STARS


def test_reputation_endpoint_verified(client, db, make_pharmacy):
    target = make_pharmacy(name="Target")
    raters = [make_pharmacy() for _ in range(2)]
    _archive_rows(db, target["id"], 5, buyers=[m["id"] for m in raters])

    for item_id, (member, stars) in enumerate(zip(raters, (5, 3))):
        r = client.post("/ratings", headers=member["headers"],
                        json={"to_pharmacy_id": target["id"], "related_item_id": item_id, "stars": stars})
        assert r.status_code == 201

    rep = client.get(f"/pharmacies/{target['id']}/reputation", headers=raters[0]["headers"]).json()
    assert rep == {
        "pharmacy_id": target["id"], "pharmacy_name": "Target",
        "rating": 4.0, "review_count": 2, "success_score": 5, "is_verified": True,
    }


def test_reputation_endpoint_not_verified_below_five(client, db, make_pharmacy):
    target = make_pharmacy()
    rater = make_pharmacy()
    _archive_rows(db, target["id"], 4, buyers=[rater["id"]])
    client.post("/ratings", headers=rater["headers"],
                json={"to_pharmacy_id": target["id"], "related_item_id": 0, "stars": 5})

    rep = client.get(f"/pharmacies/{target['id']}/reputation", headers=rater["headers"]).json()
    assert rep["success_score"] == 4
    assert rep["is_verified"] is False
