from fastapi import status
from fastapi.testclient import TestClient


ALICE = {"name": "Alice", "matricula": "2023001", "curso": "Redes"}


class TestRegisterIdentityAPI:
    """Test cases for POST /api/identities and PUT /api/identities/me"""

    def test_register(self, client: TestClient, login, alice, clock):
        response = client.post("/api/identities", json=ALICE, headers=login(alice))

        assert response.status_code == status.HTTP_201_CREATED
        assert response.json() == {
            "account": alice.address,
            "name": "Alice",
            "matricula": "2023001",
            "curso": "Redes",
            "createdAt": clock.now,
        }

    def test_register_requires_session(self, client: TestClient):
        response = client.post("/api/identities", json=ALICE)
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_register_twice(self, client: TestClient, login, alice):
        headers = login(alice)
        client.post("/api/identities", json=ALICE, headers=headers)

        response = client.post("/api/identities", json=ALICE, headers=headers)

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json()["detail"] == "Identity already exists for this wallet"

    def test_register_taken_matricula(self, client: TestClient, login, alice, bob):
        client.post("/api/identities", json=ALICE, headers=login(alice))

        response = client.post(
            "/api/identities", json={"name": "Bob", "matricula": "2023001", "curso": "Redes"}, headers=login(bob)
        )

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json()["detail"] == "Matricula already in use"

    def test_register_validation(self, client: TestClient, login, alice):
        response = client.post("/api/identities", json={"name": "Alice"}, headers=login(alice))
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    def test_update(self, client: TestClient, login, alice):
        headers = login(alice)
        client.post("/api/identities", json=ALICE, headers=headers)

        response = client.put("/api/identities/me", json={"name": "Alice B.", "curso": "Ciberseguranca"}, headers=headers)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["name"] == "Alice B."
        assert data["curso"] == "Ciberseguranca"
        assert data["matricula"] == "2023001"

    def test_update_without_identity(self, client: TestClient, login, bob):
        response = client.put("/api/identities/me", json={"name": "Bob", "curso": "Redes"}, headers=login(bob))
        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestReadIdentityAPI:
    """Test cases for the identity read endpoints"""

    def test_list_empty(self, client: TestClient):
        response = client.get("/api/identities")

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == []

    def test_list_in_registration_order(self, client: TestClient, registry, alice, bob):
        registry.write("registerIdentity", bob.address, "Bob", "2023002", "Computacao")
        registry.write("registerIdentity", alice.address, "Alice", "2023001", "Redes")

        response = client.get("/api/identities")

        assert [i["name"] for i in response.json()] == ["Bob", "Alice"]
        assert isinstance(response.json()[0]["createdAt"], int)

    def test_get_by_address(self, client: TestClient, registry, alice):
        registry.write("registerIdentity", alice.address, "Alice", "2023001", "Redes")

        response = client.get(f"/api/identities/{alice.address.lower()}")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["account"] == alice.address

    def test_get_unknown_address(self, client: TestClient, bob):
        response = client.get(f"/api/identities/{bob.address}")
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_get_malformed_address(self, client: TestClient):
        response = client.get("/api/identities/not-an-address")
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_get_by_matricula(self, client: TestClient, registry, alice):
        registry.write("registerIdentity", alice.address, "Alice", "2023001", "Redes")

        assert client.get("/api/identities/matricula/2023001").json()["name"] == "Alice"
        assert client.get("/api/identities/matricula/999").status_code == status.HTTP_404_NOT_FOUND
