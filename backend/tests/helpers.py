import uuid as uuid_lib

from fastapi.testclient import TestClient

PASSWORD = "password123"


def register(client: TestClient, email: str | None = None, password: str = PASSWORD):
    email = email or f"user_{uuid_lib.uuid4().hex[:8]}@example.com"
    response = client.post("/auth/register", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return email


def generate(client: TestClient, phrases, target_language="Russian", group_ids=None):
    payload = {"phrases": phrases, "targetLanguage": target_language}
    if group_ids is not None:
        payload["groupIds"] = group_ids
    return client.post("/cards/generate", json=payload)


def list_cards(client: TestClient) -> list[dict]:
    response = client.get("/cards")
    assert response.status_code == 200
    return response.json()["cards"]


def create_group(client: TestClient, name: str) -> dict:
    response = client.post("/groups", json={"name": name})
    assert response.status_code == 200, response.text
    return response.json()["group"]
