# tests/test_api.py
import pytest
from fastapi.testclient import TestClient

from api.dependencies import get_session
from main import app
from services.measurement_service import MeasurementService, get_measurement_service
from services.student_service import StudentService, get_student_service


@pytest.fixture
def seeded(fake_supabase):
    ana = fake_supabase.add_student("trainer-1", "Ana Souza", "ana@example.com", "2026-01-10T10:00:00+00:00",
                                    date_of_birth="1990-05-20")
    fake_supabase.add_measurement(ana, "2026-01-15T00:00:00+00:00", weight=70.0, height=175.0,
                                  waist_circumference=80.0)
    fake_supabase.add_measurement(ana, "2026-03-15T00:00:00+00:00", weight=68.0, height=175.0,
                                  waist_circumference=78.0)
    solo = fake_supabase.add_student("trainer-1", "Bruno Lima", "bruno@example.com", "2026-02-10T10:00:00+00:00")
    fake_supabase.add_measurement(solo, "2026-02-12T00:00:00+00:00", weight=90.0)
    empty = fake_supabase.add_student("trainer-1", "Caio Reis", "caio@example.com", "2026-02-11T10:00:00+00:00")
    return {'ana': ana, 'solo': solo, 'empty': empty}


@pytest.fixture
def client(fake_supabase, session):
    app.dependency_overrides[get_session] = lambda: session
    app.dependency_overrides[get_student_service] = lambda: StudentService(fake_supabase)
    app.dependency_overrides[get_measurement_service] = lambda: MeasurementService(fake_supabase)
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def anonymous_client(fake_supabase):
    app.dependency_overrides[get_session] = lambda: None
    app.dependency_overrides[get_student_service] = lambda: StudentService(fake_supabase)
    app.dependency_overrides[get_measurement_service] = lambda: MeasurementService(fake_supabase)
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_root(client):
    assert client.get("/").json()["status"] == "running"


def test_anonymous_requests_are_401_without_backend_calls(anonymous_client, fake_supabase):
    assert anonymous_client.get("/api/students").status_code == 401
    assert anonymous_client.get("/api/dashboard").status_code == 401
    assert anonymous_client.delete("/api/students/abc").status_code == 401
    assert anonymous_client.get("/api/auth/me").status_code == 401
    assert fake_supabase.requests == []


def test_me(client):
    body = client.get("/api/auth/me").json()
    assert body == {"id": "trainer-1", "email": "coach@example.com", "display_name": "Coach"}


def test_student_grid(client, seeded):
    response = client.get("/api/students")
    assert response.status_code == 200
    cards = response.json()
    assert [c["name"] for c in cards] == ["Caio Reis", "Bruno Lima", "Ana Souza"]
    ana = cards[2]
    assert ana["measurements_count"] == 2
    assert ana["latest_measurement"]["weight"] == 68.0
    assert ana["latest_bmi"] == "22.2"
    assert cards[0]["latest_bmi"] is None


def test_student_search(client, seeded):
    cards = client.get("/api/students", params={"q": "bruno@"}).json()
    assert [c["name"] for c in cards] == ["Bruno Lima"]


def test_create_student_and_validation(client, fake_supabase):
    response = client.post("/api/students", json={
        "name": "Diego", "email": "diego@example.com", "phone": "", "date_of_birth": "1995-07-01",
        "user_id": "trainer-2"
    })
    assert response.status_code == 201
    assert response.json()["user_id"] == "trainer-1"

    invalid = client.post("/api/students", json={"name": "", "email": "not-an-email", "date_of_birth": "x"})
    assert invalid.status_code == 422


def test_write_failure_surfaces_form_message(client, fake_supabase):
    fake_supabase.error = RuntimeError("duplicate key")
    response = client.post("/api/students", json={
        "name": "Diego", "email": "diego@example.com", "date_of_birth": "1995-07-01"
    })
    assert response.status_code == 500
    assert response.json()["detail"] == "Erro ao salvar aluno. Verifique os dados e tente novamente."


def test_update_unknown_student_is_404(client, seeded):
    assert client.put("/api/students/missing", json={"name": "X"}).status_code == 404


def test_delete_student_cascades(client, seeded):
    student_id = seeded['ana']['id']
    assert client.delete(f"/api/students/{student_id}").json() == {"success": True}
    assert client.get(f"/api/students/{student_id}/measurements").json() == []


def test_dashboard(client, seeded):
    body = client.get("/api/dashboard").json()
    assert body["stats"]["total_students"] == 3
    assert body["stats"]["total_measurements"] == 3
    assert body["stats"]["with_progress"] == 1
    assert len(body["cards"]) == 4
    assert len(body["recent_students"]) == 3


def test_measurement_form_round(client, seeded):
    response = client.post("/api/measurements", json={
        "student_id": seeded['empty']['id'],
        "weight": "75", "height": "178", "body_fat_percentage": "15",
        "hip_circumference": "", "measured_at": "2026-10-10", "notes": ""
    })
    assert response.status_code == 201
    created = response.json()
    assert created["hip_circumference"] is None

    updated = client.put(f"/api/measurements/{created['id']}", json={"notes": "Recuperando lesão"})
    assert updated.json()["notes"] == "Recuperando lesão"

    assert client.delete(f"/api/measurements/{created['id']}").status_code == 200
    assert client.get(f"/api/measurements/{created['id']}").status_code == 404


def test_profile_tabs(client, seeded):
    student_id = seeded['ana']['id']
    measurements_tab = client.get(f"/api/students/{student_id}/profile").json()
    assert measurements_tab["active_tab"] == "measurements"
    assert measurements_tab["header"]["can_export"] is True
    assert [m["weight"] for m in measurements_tab["measurements"]] == [68.0, 70.0]
    assert measurements_tab["charts"] is None

    charts_tab = client.get(f"/api/students/{student_id}/profile", params={"tab": "charts"}).json()
    keys = [s["key"] for s in charts_tab["charts"]["series"]]
    assert keys == ["peso", "gordura", "cintura"]
    assert charts_tab["charts"]["summary"]["weight_change"] == "-2.0"


def test_chart_svg(client, seeded):
    response = client.get(f"/api/students/{seeded['ana']['id']}/charts/cintura.svg")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("image/svg+xml")
    assert "<polyline" in response.text
    assert "78cm" in response.text


def test_chart_svg_needs_two_points_and_known_key(client, seeded):
    assert client.get(f"/api/students/{seeded['solo']['id']}/charts/peso.svg").status_code == 404
    assert client.get(f"/api/students/{seeded['ana']['id']}/charts/braco.svg").status_code == 422


def test_export_options(client, seeded):
    ana = client.get(f"/api/students/{seeded['ana']['id']}/export/options").json()
    assert ana["requires_chart_selection"] is True
    assert [c["key"] for c in ana["available_charts"]] == ["peso", "gordura", "cintura"]

    solo = client.get(f"/api/students/{seeded['solo']['id']}/export/options").json()
    assert solo == {"has_measurement": True, "requires_chart_selection": False, "available_charts": []}


def test_export_requires_a_chart_with_history(client, seeded):
    response = client.post(f"/api/students/{seeded['ana']['id']}/export", json={"gender": "female", "charts": []})
    assert response.status_code == 422


def test_export_rejects_chart_without_data(client, seeded):
    response = client.post(f"/api/students/{seeded['ana']['id']}/export", json={"charts": ["peito"]})
    assert response.status_code == 422


def test_export_pdf(client, seeded):
    response = client.post(f"/api/students/{seeded['ana']['id']}/export",
                           json={"gender": "female", "charts": ["peso", "cintura"]})
    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert "Ana_Souza_medicoes_" in response.headers["content-disposition"]
    assert response.content.startswith(b"%PDF")


def test_export_single_measurement_skips_charts(client, seeded):
    response = client.post(f"/api/students/{seeded['solo']['id']}/export", json={"charts": ["peito"]})
    assert response.status_code == 200


def test_export_without_measurements(client, seeded):
    response = client.post(f"/api/students/{seeded['empty']['id']}/export", json={})
    assert response.status_code == 400
    assert response.json()["detail"] == "Não há medições disponíveis para gerar o PDF."
