import pytest
from rest_framework.test import APIClient

from liturgy.domain.models import Availability, Volunteer
from liturgy.domain.roles import RoleSelections

ADMIN_PASSWORD = "senha-de-teste"

@pytest.fixture
def admin_password():
    return ADMIN_PASSWORD

@pytest.fixture(autouse=True)
def _admin_password(settings):
    settings.ADMIN_PASSWORD = ADMIN_PASSWORD
    settings.ADMIN_SESSION_TTL_MINUTES = 60

@pytest.fixture
def api_client():
    return APIClient()

@pytest.fixture
def admin_api(db):
    client = APIClient()
    resp = client.post("/login/", {"password": ADMIN_PASSWORD})
    assert resp.status_code == 302
    return client

@pytest.fixture
def volunteers(db):
    names = ["Ana", "Bruno", "Carla", "Daniel", "Eva", "Fábio"]
    return [Volunteer.objects.create(name=n) for n in names]

@pytest.fixture
def full_selections(volunteers):
    """Escala válida: Ana no comentário, Bruno e Carla nas leituras, Daniel..Eva nas preces."""
    a, b, c, d, e, f = volunteers
    return RoleSelections.from_dict({
        "commentary": [a.id],
        "reading_1": [b.id],
        "reading_2": [c.id],
        "prayer_1": [d.id],
        "prayer_2": [e.id],
        "prayer_3": [f.id],
        "prayer_4": [a.id],
    })

@pytest.fixture
def available(volunteers):
    """Todos os voluntários inscritos nas datas usadas pelos testes de escala."""
    dates = ["2024-12-29", "2025-03-02", "2025-03-09"]
    Availability.objects.bulk_create([
        Availability(volunteer=v, date=d) for v in volunteers for d in dates
    ])
    return dates
