import asyncio
import json

from conftest import PASSWORD, SEED_ADMIN
from portal.auth import AuthFlow, EMAIL_NOT_FOUND, EMAIL_TAKEN, INVALID_PASSWORD, UNAUTHORIZED_ADMIN
from portal.session import SessionStore, SESSION_KEYS


def test_clear_removes_only_session_keys(tmp_path):
    path = tmp_path / "session.json"
    store = SessionStore(path)
    store.set("theme", "dark")
    store.begin({"access_token": "t", "pharmacy_id": 5, "profile": {"pharmacy_name": "X"}}, "x@example.com")
    assert store.token == "t"
    assert store.pharmacy_id == 5

    store.clear()
    data = json.loads(path.read_text(encoding="utf-8"))
    assert data == {"theme": "dark"}
    assert not any(key in data for key in SESSION_KEYS)

    # A fresh store reads what was persisted
    assert SessionStore(path).get("theme") == "dark"


def test_unreadable_session_file_starts_empty(tmp_path):
    path = tmp_path / "session.json"
    path.write_text("{not json", encoding="utf-8")
    assert SessionStore(path).token is None


def _run(api, factory):
    async def scenario():
        try:
            return await factory()
        finally:
            await api.aclose()
    return asyncio.run(scenario())


def test_register_then_profile_then_login(portal):
    api, session, notifier, transport = portal()
    flow = AuthFlow(api, session, notifier)

    async def scenario():
        pharmacy_id = await flow.register("new@example.com", PASSWORD)
        again = await flow.register("new@example.com", PASSWORD)
        profile = await flow.save_profile(pharmacy_id, "new@example.com", "New Pharmacy", city="Tanta")
        login = await flow.login("NEW@example.com", PASSWORD)
        return pharmacy_id, again, profile, login

    pharmacy_id, again, profile, login = _run(api, scenario)
    assert again is None
    assert EMAIL_TAKEN in [n.message for n in notifier.notices]
    assert profile["city"] == "Tanta"
    assert login["pharmacy_id"] == pharmacy_id
    assert session.pharmacy_id == pharmacy_id
    assert session.profile["pharmacy_name"] == "New Pharmacy"
    assert session.is_admin is False


def test_login_errors_are_mapped(portal, make_pharmacy):
    member = make_pharmacy()
    api, session, notifier, transport = portal()
    flow = AuthFlow(api, session, notifier)

    async def scenario():
        return (await flow.login("ghost@example.com", PASSWORD), await flow.login(member["email"], "bad-pass"))

    assert _run(api, scenario) == (None, None)
    assert [n.message for n in notifier.notices] == [EMAIL_NOT_FOUND, INVALID_PASSWORD]
    assert session.token is None


def test_admin_check_and_logout(portal):
    api, session, notifier, transport = portal()
    flow = AuthFlow(api, session, notifier)

    async def scenario():
        await flow.login(SEED_ADMIN["email"], SEED_ADMIN["password"])
        allowed = await flow.check_admin()
        await flow.logout()
        return allowed

    assert _run(api, scenario) is True
    assert ("POST", "/auth/logout") in transport.calls
    assert session.token is None
    assert session.is_admin is False


def test_non_admin_is_sent_back_to_login(portal, make_pharmacy):
    member = make_pharmacy()
    api, session, notifier, transport = portal(member)
    flow = AuthFlow(api, session, notifier)

    assert _run(api, flow.check_admin) is False
    assert notifier.last.message == UNAUTHORIZED_ADMIN
    assert session.token is None
    assert session.pharmacy_id is None


def test_logged_in_profile_edit_uses_profile_route(portal, make_pharmacy):
    member = make_pharmacy(name="Old Name")
    api, session, notifier, transport = portal(member)
    flow = AuthFlow(api, session, notifier)

    profile = _run(api, lambda: flow.save_profile(member["id"], member["email"], "New Name", city="Luxor"))
    assert profile["pharmacy_name"] == "New Name"
    assert ("PATCH", "/profile") in transport.calls
    assert ("POST", "/webhook/save-profile") not in transport.calls
    assert session.profile["city"] == "Luxor"
