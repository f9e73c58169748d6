import pytest
from fastapi import status
from fastapi.testclient import TestClient


@pytest.fixture
def alice_headers(client: TestClient, login, alice):
    headers = login(alice)
    response = client.post(
        "/api/identities", json={"name": "Alice", "matricula": "2023001", "curso": "Redes"}, headers=headers
    )
    assert response.status_code == status.HTTP_201_CREATED
    return headers


class TestCreateEventAPI:
    """Test cases for POST /api/events"""

    def test_create_sequential(self, client: TestClient, alice_headers, alice, clock):
        first = client.post(
            "/api/events", json={"title": "Aula 1", "description": "Intro", "eventDate": 1700000000}, headers=alice_headers
        )
        second = client.post(
            "/api/events", json={"title": "Aula 2", "description": "Lab", "eventDate": 1700003600}, headers=alice_headers
        )

        assert first.status_code == status.HTTP_201_CREATED
        assert first.json() == {
            "id": 1,
            "owner": alice.address,
            "title": "Aula 1",
            "description": "Intro",
            "eventDate": 1700000000,
            "createdAt": clock.now,
        }
        assert second.json()["id"] == 2

        owned = client.get("/api/events", params={"owner": alice.address}).json()
        assert [e["id"] for e in owned] == [1, 2]

    def test_create_requires_identity(self, client: TestClient, login, bob):
        response = client.post("/api/events", json={"title": "Palestra"}, headers=login(bob))

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert client.get("/api/events").json() == []

    def test_create_requires_session(self, client: TestClient):
        response = client.post("/api/events", json={"title": "Palestra"})
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_negative_event_date(self, client: TestClient, alice_headers):
        response = client.post("/api/events", json={"title": "Aula", "eventDate": -1}, headers=alice_headers)
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    def test_event_date_beyond_ledger_range(self, client: TestClient, alice_headers):
        response = client.post("/api/events", json={"title": "Aula", "eventDate": 2**63}, headers=alice_headers)

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert client.get("/api/events").json() == []


class TestReadEventAPI:
    """Test cases for the event read endpoints"""

    def test_list_all_and_by_owner(self, client: TestClient, registry, alice, bob):
        registry.write("createEvent", alice.address, "Aula 1", "Intro", 1700000000)
        registry.write("createEvent", bob.address, "Palestra", "Convidado", 1700010000)
        registry.write("createEvent", alice.address, "Aula 2", "Lab", 1700003600)

        all_events = client.get("/api/events").json()
        assert [e["id"] for e in all_events] == [1, 2, 3]

        bob_events = client.get(f"/api/events?owner={bob.address.lower()}").json()
        assert [e["title"] for e in bob_events] == ["Palestra"]

    def test_list_bad_owner(self, client: TestClient):
        response = client.get("/api/events", params={"owner": "0x123"})
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_get_event(self, client: TestClient, registry, alice):
        registry.write("createEvent", alice.address, "Aula 1", "Intro", 0)

        response = client.get("/api/events/1")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["eventDate"] == 0

    def test_get_missing_event(self, client: TestClient):
        assert client.get("/api/events/7").status_code == status.HTTP_404_NOT_FOUND

    def test_get_event_bad_id(self, client: TestClient):
        assert client.get("/api/events/abc").status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    def test_get_event_id_beyond_ledger_range(self, client: TestClient):
        assert client.get(f"/api/events/{2**70}").status_code == status.HTTP_404_NOT_FOUND
        assert client.get("/api/events/-3").status_code == status.HTTP_404_NOT_FOUND
