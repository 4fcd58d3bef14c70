from __future__ import annotations

from laptracker.auth import COOKIE_NAME
from tests.conftest import ADMIN_EMAIL, ADMIN_PASSWORD, add_runner, login_as

EMPTY = "Keine Läufer vorhanden"


def test_access_denied_without_session(client, db) -> None:
    add_runner(db, 1, first="Anna")
    r = client.get("/runners")
    assert r.status_code == 403
    assert "Zugriff verweigert" in r.text
    assert "Anna" not in r.text


def test_access_denied_for_other_roles(client) -> None:
    login_as(client, "guest@example.org", "guest")
    r = client.get("/runners")
    assert r.status_code == 403
    assert "Zugriff verweigert" in r.text
    assert "runners-table" not in r.text


def test_empty_state(client) -> None:
    login_as(client, "helper@example.org", "helper")
    r = client.get("/runners")
    assert r.status_code == 200
    assert EMPTY in r.text


def test_table_rows_in_number_order(client, db) -> None:
    add_runner(db, 10, first="Zoe")
    add_runner(db, 2, first="Ben", laps=2)
    login_as(client, "helper@example.org", "helper")

    r = client.get("/runners")
    assert r.status_code == 200
    html = r.text
    assert html.index('data-number="2"') < html.index('data-number="10"')
    assert "Ben" in html and "Zoe" in html
    # the empty-state row is only rendered for zero rows
    assert '<p class="empty">' not in html
    # initial data for the script
    assert '"_count": {"laps": 2}' in html


def test_delete_fallback_maps_outcomes_to_notices(client, db) -> None:
    add_runner(db, 1)
    login_as(client, "helper@example.org", "helper")

    r = client.post("/runners/1/delete", follow_redirects=False)
    assert r.status_code == 302
    assert r.headers["location"] == "/runners?notice=deleted"

    r = client.post("/runners/1/delete", follow_redirects=False)
    assert r.headers["location"] == "/runners?notice=not_found"

    page = client.get("/runners?notice=not_found")
    assert "Läufer nicht gefunden" in page.text
    assert EMPTY in page.text


def test_delete_fallback_forbidden_and_anonymous(client, db) -> None:
    add_runner(db, 1)

    r = client.post("/runners/1/delete", follow_redirects=False)
    assert r.headers["location"] == "/login"

    login_as(client, "guest@example.org", "guest")
    r = client.post("/runners/1/delete", follow_redirects=False)
    assert r.headers["location"] == "/runners?notice=forbidden"

    login_as(client, "helper@example.org", "helper")
    assert [row["number"] for row in client.get("/api/runners").json()["data"]] == [1]


def test_unknown_notice_is_ignored(client) -> None:
    login_as(client, "helper@example.org", "helper")
    r = client.get("/runners?notice=bogus")
    assert r.status_code == 200
    assert "toast-" not in r.text.split('id="toasts"', 1)[1].split("</div>", 1)[0]


def test_login_sets_session_cookie(client) -> None:
    r = client.post("/login", data={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD}, follow_redirects=False)
    assert r.status_code == 302
    assert COOKIE_NAME in r.cookies

    page = client.get("/runners")
    assert page.status_code == 200
    assert ADMIN_EMAIL in page.text


def test_login_rejects_bad_password(client) -> None:
    r = client.post("/login", data={"email": ADMIN_EMAIL, "password": "wrong"})
    assert r.status_code == 401
    assert "E-Mail oder Passwort falsch." in r.text
    assert client.get("/runners").status_code == 403


def test_logout_clears_session(client) -> None:
    client.post("/login", data={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert client.get("/runners").status_code == 200

    client.post("/logout")
    assert client.get("/runners").status_code == 403
