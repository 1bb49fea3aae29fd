import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

from foundation.models.common import TeamStatus
from foundation.models.people import TemporaryPerson
from foundation.models.team import Team


@pytest.fixture
def temporary_squad(make_temporary):
    """Two temporary athletes and a temporary coach"""
    return {
        "players": [make_temporary(first_name="Mario"), make_temporary(first_name="Pedro")],
        "coach": make_temporary(first_name="Rosa", last_name="Diaz"),
    }


@pytest.fixture
def create_payload(temporary_squad):
    return {
        "nombre": "Tigres",
        "teamType": "temporal",
        "categoria": "Libre",
        "telefono": "3001234567",
        "deportistasIds": [p.id for p in temporary_squad["players"]],
        "entrenadorData": {"id": temporary_squad["coach"].id, "type": "temporal"},
    }


@pytest.fixture
def created_team(client: TestClient, create_payload):
    response = client.post("/api/v1/teams", json=create_payload)
    assert response.status_code == 201
    return response.json()


class TestCreateTeam:
    def test_create(self, client, created_team, temporary_squad):
        assert created_team["nombre"] == "Tigres"
        assert created_team["estado"] == "Activo"
        assert created_team["teamType"] == "temporary"
        assert created_team["cantidadDeportistas"] == 2
        assert created_team["deportistasIds"] == [p.id for p in temporary_squad["players"]]
        assert created_team["entrenadorData"]["name"] == "Rosa Diaz"

    def test_labels_are_written(self, db_session: Session, created_team, temporary_squad):
        for person in temporary_squad["players"]:
            db_session.refresh(person)
            assert (person.team, person.category) == ("Tigres", "Libre")

    def test_duplicate_name(self, client, created_team, make_temporary):
        payload = {
            "nombre": "tigres",
            "teamType": "temporal",
            "deportistasIds": [make_temporary().id],
        }

        response = client.post("/api/v1/teams", json=payload)

        assert response.status_code == 400
        assert response.json() == {
            "success": False,
            "message": 'The team "tigres" is already registered.',
        }

    def test_empty_roster(self, client):
        response = client.post(
            "/api/v1/teams", json={"nombre": "Tigres", "teamType": "fundacion"}
        )

        assert response.status_code == 400
        assert response.json()["message"] == "The team must have at least one athlete."

    def test_person_already_on_active_team(self, client, created_team, temporary_squad):
        payload = {
            "nombre": "Leones",
            "teamType": "temporal",
            "deportistasIds": [temporary_squad["players"][0].id],
        }

        response = client.post("/api/v1/teams", json=payload)

        assert response.status_code == 400
        assert response.json()["success"] is False
        assert 'already belongs to the active team "Tigres"' in response.json()["message"]

    def test_short_name_is_a_400(self, client):
        response = client.post(
            "/api/v1/teams",
            json={"nombre": "ab", "teamType": "fundacion", "deportistasIds": [1]},
        )

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["field"] == "nombre"
        assert body["message"] == "Team name must be between 3 and 100 characters."

    def test_foundation_team(self, client, make_athlete, make_employee):
        athletes = [make_athlete(), make_athlete(first_name="Sara")]
        coach = make_employee()

        response = client.post(
            "/api/v1/teams",
            json={
                "nombre": "Sub-15 A",
                "teamType": "fundacion",
                "deportistasIds": [a.id for a in athletes],
                "entrenadorData": {"id": coach.id},
            },
        )

        assert response.status_code == 201
        body = response.json()
        assert [m["kind"] for m in body["deportistas"]] == ["athlete", "athlete"]
        assert body["entrenadorData"]["kind"] == "employee"


class TestReadTeams:
    def test_get(self, client, created_team):
        response = client.get(f"/api/v1/teams/{created_team['id']}")

        assert response.status_code == 200
        assert response.json()["nombre"] == "Tigres"

    def test_get_missing(self, client):
        response = client.get("/api/v1/teams/999")

        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "No team found with ID 999."}

    def test_list(self, client, created_team):
        response = client.get("/api/v1/teams", params={"search": "tig", "status": "activo"})

        assert response.status_code == 200
        body = response.json()
        assert [team["id"] for team in body["data"]] == [created_team["id"]]
        assert body["pagination"] == {
            "page": 1,
            "limit": 10,
            "total": 1,
            "totalPages": 1,
            "hasNext": False,
            "hasPrev": False,
        }

    def test_list_rejects_unknown_type(self, client):
        response = client.get("/api/v1/teams", params={"teamType": "mixto"})

        assert response.status_code == 400
        assert response.json()["message"].startswith("Team type must be")

    def test_list_limit_bounds(self, client):
        response = client.get("/api/v1/teams", params={"limit": 0})

        assert response.status_code == 400
        assert response.json()["field"] == "limit"

    def test_check_name(self, client, created_team):
        taken = client.get("/api/v1/teams/check-name", params={"name": "TIGRES"}).json()
        own = client.get(
            "/api/v1/teams/check-name",
            params={"name": "Tigres", "excludeId": created_team["id"]},
        ).json()

        assert taken == {"available": False, "message": 'The name "TIGRES" is already registered.'}
        assert own == {"available": True, "message": "Name available"}

    def test_check_name_agrees_with_create(self, client, make_temporary):
        payload = {
            "nombre": "Los Tigres",
            "teamType": "temporal",
            "deportistasIds": [make_temporary().id],
        }
        assert client.post("/api/v1/teams", json=payload).status_code == 201

        checked = client.get("/api/v1/teams/check-name", params={"name": "los   TIGRES"})
        created = client.post(
            "/api/v1/teams",
            json={**payload, "nombre": "Los  Tigres", "deportistasIds": [make_temporary().id]},
        )

        assert checked.json() == {
            "available": False,
            "message": 'The name "los TIGRES" is already registered.',
        }
        assert created.status_code == 400

    @pytest.mark.parametrize("search", ["%", "_", "\\"])
    def test_search_wildcards_are_literal(self, client, created_team, search):
        response = client.get("/api/v1/teams", params={"search": search})

        assert response.status_code == 200
        assert response.json()["pagination"]["total"] == 0

    def test_stats(self, client, created_team):
        response = client.get("/api/v1/teams/stats")

        assert response.json() == {
            "total": 1,
            "active": 1,
            "inactive": 0,
            "foundation": 0,
            "temporary": 1,
        }


class TestUpdateTeam:
    def test_update_fields(self, client, created_team):
        response = client.put(
            f"/api/v1/teams/{created_team['id']}",
            json={"nombre": "Tigres B", "descripcion": "Torneo de verano"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["nombre"] == "Tigres B"
        assert body["descripcion"] == "Torneo de verano"
        assert body["cantidadDeportistas"] == 2

    def test_empty_roster(self, client, created_team):
        response = client.put(
            f"/api/v1/teams/{created_team['id']}", json={"deportistasIds": []}
        )

        assert response.status_code == 400
        assert response.json()["message"] == "The team must have at least one athlete."

    def test_missing_team(self, client):
        response = client.put("/api/v1/teams/999", json={"nombre": "Nadie"})

        assert response.status_code == 404

    def test_change_status(self, client, db_session: Session, created_team):
        response = client.patch(
            f"/api/v1/teams/{created_team['id']}/status", json={"status": "Inactivo"}
        )

        assert response.status_code == 200
        assert response.json()["estado"] == "Inactivo"
        assert db_session.get(Team, created_team["id"]).status == TeamStatus.inactive


class TestDeleteTeam:
    def test_delete(self, client, db_session: Session, created_team, temporary_squad):
        response = client.delete(f"/api/v1/teams/{created_team['id']}")

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "message": 'Team "Tigres" deleted successfully.',
        }
        assert client.get(f"/api/v1/teams/{created_team['id']}").status_code == 404

        person = db_session.get(TemporaryPerson, temporary_squad["players"][0].id)
        db_session.refresh(person)
        assert person.team is None

    def test_delete_twice(self, client, created_team):
        client.delete(f"/api/v1/teams/{created_team['id']}")

        response = client.delete(f"/api/v1/teams/{created_team['id']}")

        assert response.status_code == 404


def test_request_id_is_echoed(client):
    response = client.get("/health", headers={"X-Request-ID": "req-123"})

    assert response.status_code == 200
    assert response.headers["X-Request-ID"] == "req-123"


def test_request_id_is_generated(client):
    response = client.get("/")

    assert response.json() == {"message": "Foundation Backend API"}
    assert response.headers["X-Request-ID"]
