from datetime import datetime, timezone

from models.archive import SalesArchive
from utils.reports import archive_report, dashboard, period_start, sold_trend


def test_week_starts_on_sunday():
    wednesday = datetime(2026, 10, 14, 15, 30, tzinfo=timezone.utc)
    assert period_start("week", wednesday) == datetime(2026, 10, 11, tzinfo=timezone.utc)

    sunday = datetime(2026, 10, 11, 9, 0, tzinfo=timezone.utc)
    assert period_start("week", sunday) == datetime(2026, 10, 11, tzinfo=timezone.utc)

    assert period_start("month", wednesday) == datetime(2026, 10, 1, tzinfo=timezone.utc)
    assert period_start("today", wednesday) == datetime(2026, 10, 14, tzinfo=timezone.utc)
    assert period_start("all", wednesday) is None


def test_sold_trend():
    assert sold_trend(15, 10) == 50
    assert sold_trend(5, 10) == -50
    assert sold_trend(3, 0) == 100
    assert sold_trend(0, 0) == 0


def _row(pharmacy_id, quantity, action_type, created_at, price=10.0, item_id=1):
    return SalesArchive(pharmacy_id=pharmacy_id, item_id=item_id, item_kind="offer", english_name=f"Drug {quantity}",
                        quantity=quantity, price=price, action_type=action_type, created_at=created_at)


def test_archive_report_filters_and_sorts(db):
    now = datetime(2026, 10, 14, 12, 0, tzinfo=timezone.utc)
    db.add_all([
        _row(1, 2, "Internal Sale", datetime(2026, 10, 13, 10, 0)),
        _row(1, 9, "Transfer", datetime(2026, 10, 12, 10, 0)),
        _row(1, 4, "Marketplace Sale", datetime(2026, 10, 12, 18, 0)),
        _row(1, 50, "Transfer", datetime(2026, 9, 20, 10, 0)),
        _row(2, 99, "Transfer", datetime(2026, 10, 13, 10, 0)),
    ])
    db.commit()

    report = archive_report(db, 1, "week", now=now)
    assert [r["quantity"] for r in report["rows"]] == [9, 4, 2]
    assert report["daily"] == [{"date": "2026-10-12", "count": 2}, {"date": "2026-10-13", "count": 1}]
    assert report["total_transactions"] == 3
    assert report["total_quantity"] == 15
    assert report["total_value"] == 150.0

    everything = archive_report(db, 1, "all", now=now)
    assert everything["total_transactions"] == 4
    assert everything["rows"][0]["quantity"] == 50


def test_archive_report_empty(db):
    report = archive_report(db, 1, "month")
    assert report["rows"] == []
    assert report["daily"] == []
    assert report["total_quantity"] == 0


def test_dashboard_counts(client, make_pharmacy, catalog, add_offer, add_request):
    member = make_pharmacy()
    buyer = make_pharmacy()
    first = add_offer(member, catalog[0], quantity=10, price=20.0)
    second = add_offer(member, catalog[1], quantity=4, price=5.0)
    add_request(member, catalog[2])

    client.post(f"/offers/{first['id']}/archive", headers=member["headers"],
                json={"action_type": "Internal Sale", "quantity": 3})
    # Marketplace sales are not counted as sold stock
    client.post(f"/marketplace/offers/{second['id']}/transactions", headers=buyer["headers"], json={"quantity": 1})
    client.post("/ratings", headers=buyer["headers"],
                json={"to_pharmacy_id": member["id"], "related_item_id": second["id"], "stars": 4})

    board = client.get("/reports/dashboard", headers=member["headers"]).json()
    assert board["total_offers"] == 2
    assert board["total_requests"] == 1
    assert board["total_offers_value"] == 7 * 20.0 + 3 * 5.0
    assert board["sold_quantity"] == 3
    assert board["sold_trend"] == 100
    assert board["success_score"] == 2
    assert board["average_rating"] == 4.0
    assert len(board["recent_activity"]) == 5
    labels = {a["label"] for a in board["recent_activity"]}
    assert {"New Offer", "New Request", "Offer Sold/Transferred", "Item Archived"} == labels


def test_dashboard_without_activity(db):
    board = dashboard(db, 12345)
    assert board["total_offers"] == 0
    assert board["sold_quantity"] == 0
    assert board["average_rating"] == 0.0
    assert board["recent_activity"] == []


def test_archive_report_endpoint_and_pdf(client, make_pharmacy, catalog, add_offer):
    member = make_pharmacy(name="Report Pharmacy")
    offer = add_offer(member, catalog[0], quantity=6, price=10.0)
    client.post(f"/offers/{offer['id']}/archive", headers=member["headers"],
                json={"action_type": "Transfer", "quantity": 2})

    report = client.get("/reports/archive", headers=member["headers"], params={"period": "all"}).json()
    assert report["total_quantity"] == 2
    assert report["rows"][0]["action_type"] == "Transfer"

    assert client.get("/reports/archive", headers=member["headers"], params={"period": "year"}).status_code == 422

    r = client.get("/reports/archive.pdf", headers=member["headers"], params={"period": "all"})
    assert r.status_code == 200
    assert r.headers["content-type"] == "application/pdf"
    assert r.content.startswith(b"%PDF")
