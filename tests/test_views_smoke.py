import pytest

from liturgy.domain.models import RoleAssignment
from liturgy.domain.repositories import PublicationRepository

@pytest.mark.django_db
def test_index_view(client, full_selections):
    PublicationRepository.set_announcement(2025, 3, "Primeiro parágrafo.\n\nSegundo.")
    RoleAssignment.objects.create(date="2025-03-09", selections=full_selections.to_dict(), version=1)
    resp = client.get("/", {"year": 2025, "month": 3})
    assert resp.status_code == 200
    html = resp.content.decode()
    assert "<p>Primeiro parágrafo.</p>" in html
    assert "9 de março (dom)" in html
    assert "1ª Leitura" in html
    assert "Bruno" in html

@pytest.mark.django_db
def test_index_invalid_month_redirects(client):
    resp = client.get("/", {"year": 2025, "month": 13})
    assert resp.status_code == 302

@pytest.mark.django_db
def test_status_requires_admin(client):
    resp = client.get("/status/")
    assert resp.status_code == 302
    assert resp.url.startswith("/login/")

@pytest.mark.django_db
def test_login_status_logout(client, admin_password, volunteers):
    resp = client.post("/login/", {"password": "errada"})
    assert resp.status_code == 200
    assert "Senha incorreta." in resp.content.decode()

    resp = client.post("/login/", {"password": admin_password, "next": "/status/"})
    assert resp.status_code == 302
    assert resp.url == "/status/"

    resp = client.get("/status/", {"year": 2025, "month": 3})
    assert resp.status_code == 200
    assert "Ninguém inscrito." in resp.content.decode()

    resp = client.post("/logout/")
    assert resp.status_code == 302
    assert client.get("/status/").status_code == 302

@pytest.mark.django_db
def test_login_ignores_external_next(client, admin_password):
    resp = client.post("/login/", {"password": admin_password, "next": "https://example.com/"})
    assert resp.url == "/"

@pytest.mark.django_db
def test_logout_requires_post(client):
    assert client.get("/logout/").status_code == 405

@pytest.mark.django_db
def test_login_rotates_session_cookie(client, admin_password):
    session = client.session
    session["visto"] = True
    session.save()
    before = client.cookies["sessionid"].value

    client.post("/login/", {"password": admin_password})
    assert client.cookies["sessionid"].value != before
    assert client.session["visto"] is True
