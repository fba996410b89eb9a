import asyncio

from portal.api import ApiError
from portal.notify import Notifier
from portal.search import CatalogSearch, MISSING_FIELDS_ERROR, MISSING_SENT
from models.catalog import CatalogDrug, PendingItem
from utils.catalog import escape_like, search_catalog


class FakeCatalogApi:
    """Records search calls; answers from a fixed list or raises."""

    def __init__(self, drugs=None, fail=False, delay=0.0):
        self.drugs = drugs or []
        self.fail = fail
        self.delay = delay
        self.queries = []
        self.posts = []

    async def search_catalog(self, query):
        self.queries.append(query)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail:
            raise ApiError(500, "boom")
        return [d for d in self.drugs if query.lower() in d["english_name"].lower()]

    async def post(self, path, json=None):
        self.posts.append((path, json))
        return {"id": 1, **json}


DRUGS = [{"id": 1, "english_name": "Panadol Advance"}, {"id": 2, "english_name": "Panadol Extra"}]


def test_search_endpoint_matches_both_names(client, make_pharmacy, catalog):
    member = make_pharmacy()
    r = client.get("/catalog/search", headers=member["headers"], params={"q": "panadol"})
    assert {d["english_name"] for d in r.json()} == {"Panadol Advance", "Panadol Extra"}

    r = client.get("/catalog/search", headers=member["headers"], params={"q": "كونكور"})
    assert [d["english_name"] for d in r.json()] == ["Concor 5mg"]


def test_search_treats_wildcards_literally(db, catalog):
    assert search_catalog(db, "a_a") == []
    assert search_catalog(db, "Pan%Extra") == []

    db.add(CatalogDrug(barcode="6221000000032", english_name="Zinc 50% Cream", arabic_name="زنك"))
    db.commit()
    assert [d.english_name for d in search_catalog(db, "50%")] == ["Zinc 50% Cream"]
    assert escape_like("10%_off") == "10\\%\\_off"


def test_search_endpoint_short_query_is_empty(client, make_pharmacy, catalog):
    member = make_pharmacy()
    r = client.get("/catalog/search", headers=member["headers"], params={"q": "pa"})
    assert r.status_code == 200
    assert r.json() == []


def test_search_endpoint_caps_results(client, db, make_pharmacy):
    db.add_all([CatalogDrug(english_name=f"Vitamin C {i}", arabic_name="فيتامين", barcode=str(100 + i))
                for i in range(15)])
    db.commit()
    member = make_pharmacy()
    r = client.get("/catalog/search", headers=member["headers"], params={"q": "vitamin"})
    assert len(r.json()) == 10


def test_rapid_keystrokes_issue_one_search():
    api = FakeCatalogApi(DRUGS)

    async def scenario():
        search = CatalogSearch(api, Notifier())
        for text in ("pan", "pana", "panad", "panado", "panadol"):
            search.set_query(text)
            await asyncio.sleep(0.05)
        await search.settle()
        return search

    search = asyncio.run(scenario())
    assert api.queries == ["panadol"]
    assert [d["id"] for d in search.results] == [1, 2]


def test_short_query_clears_results_without_request():
    api = FakeCatalogApi(DRUGS)

    async def scenario():
        search = CatalogSearch(api, Notifier(), debounce=0.01)
        search.set_query("panadol")
        await search.settle()
        assert search.results
        search.set_query("pa")
        await asyncio.sleep(0.05)
        return search

    search = asyncio.run(scenario())
    assert api.queries == ["panadol"]
    assert search.results == []


def test_latest_query_wins_over_slow_one():
    api = FakeCatalogApi(DRUGS, delay=0.1)

    async def scenario():
        search = CatalogSearch(api, Notifier(), debounce=0.01)
        search.set_query("advance")
        await asyncio.sleep(0.05)  # first lookup now in flight
        search.set_query("extra")
        await search.settle()
        await asyncio.sleep(0.15)
        return search

    search = asyncio.run(scenario())
    assert [d["id"] for d in search.results] == [2]


def test_failed_search_reads_as_empty():
    api = FakeCatalogApi(DRUGS, fail=True)

    async def scenario():
        search = CatalogSearch(api, Notifier(), debounce=0.01)
        search.set_query("panadol")
        await search.settle()
        return search

    search = asyncio.run(scenario())
    assert search.results == []


def test_close_cancels_pending_timer():
    api = FakeCatalogApi(DRUGS)

    async def scenario():
        search = CatalogSearch(api, Notifier(), debounce=0.05)
        search.set_query("panadol")
        search.close()
        await asyncio.sleep(0.1)

    asyncio.run(scenario())
    assert api.queries == []


def test_no_match_offers_missing_item_form():
    api = FakeCatalogApi(DRUGS)
    notifier = Notifier()

    async def scenario():
        search = CatalogSearch(api, notifier, debounce=0.01)
        search.set_query("Zyrtec")
        await search.settle()
        form = search.missing_item_form()

        incomplete = await search.submit_missing_item(name_ar="", name_en=form["name_en"], brand="UCB", price="30")
        complete = await search.submit_missing_item(name_ar="زيرتك", name_en=form["name_en"], brand="UCB",
                                                    price="30 EGP")
        return search, form, incomplete, complete

    search, form, incomplete, complete = asyncio.run(scenario())
    assert search.missing_item_query == "Zyrtec"
    assert form["name_en"] == "Zyrtec"
    assert incomplete is False
    assert complete is True
    assert len(api.posts) == 1
    assert api.posts[0][1]["price"] == "30 EGP"
    assert [n.message for n in notifier.notices] == [MISSING_FIELDS_ERROR, MISSING_SENT]


def test_pending_submission_endpoint(client, db, make_pharmacy):
    member = make_pharmacy()
    r = client.post("/catalog/pending", headers=member["headers"], json={
        "arabic_name": "زيرتك", "english_name": "Zyrtec", "brand": "UCB", "price": "30 EGP",
    })
    assert r.status_code == 201
    item = db.query(PendingItem).one()
    assert item.added_by == member["id"]
    assert item.price == "30 EGP"

    r = client.post("/catalog/pending", headers=member["headers"], json={
        "arabic_name": "زيرتك", "english_name": "Zyrtec", "brand": "", "price": "30",
    })
    assert r.status_code == 422
