"""Tests for the record collection endpoints."""

import pytest
from fastapi.testclient import TestClient

from workshop_journal.api.app import create_app
from workshop_journal.containers import AppContainer


@pytest.fixture
def client(container: AppContainer) -> TestClient:
    return TestClient(create_app(container))


def test_health(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_workshops_get_sequential_ids(client: TestClient) -> None:
    first = client.post("/api/workshops", json={"title": "Lego", "status": "active"})
    second = client.post(
        "/api/workshops",
        json={
            "title": "Klei",
            "description": "Boetseren",
            "learningGoals": ["fijne motoriek"],
            "materials": ["klei"],
        },
    )

    assert first.status_code == 201
    assert first.json()["id"] == 1
    assert first.json()["description"] == ""
    assert second.status_code == 201
    assert second.json()["id"] == 2
    assert second.json()["learningGoals"] == ["fijne motoriek"]
    assert second.json()["status"] == "active"

    listed = client.get("/api/workshops").json()
    assert [w["title"] for w in listed] == ["Lego", "Klei"]


def test_get_single_record(client: TestClient) -> None:
    client.post("/api/children", json={"name": "Sam", "dateOfBirth": "2018-04-01"})

    response = client.get("/api/children/1")

    assert response.status_code == 200
    assert response.json() == {
        "id": 1,
        "name": "Sam",
        "dateOfBirth": "2018-04-01",
        "notes": None,
    }


@pytest.mark.parametrize(
    ("path", "message"),
    [
        ("/api/children/5", "Kind niet gevonden"),
        ("/api/workshops/5", "Workshop niet gevonden"),
        ("/api/sessions/5", "Sessie niet gevonden"),
        ("/api/observations/5", "Observatie niet gevonden"),
        ("/api/recordings/5", "Opname niet gevonden"),
        ("/api/moments/5", "Gemarkeerd moment niet gevonden"),
    ],
)
def test_missing_record_returns_404(client: TestClient, path: str, message: str) -> None:
    response = client.get(path)

    assert response.status_code == 404
    assert response.json() == {"message": message}


def test_patch_missing_workshop_returns_404(client: TestClient) -> None:
    response = client.patch("/api/workshops/999", json={"status": "completed"})

    assert response.status_code == 404
    assert response.json() == {"message": "Workshop niet gevonden"}


def test_patch_missing_record_is_404_whatever_the_body(client: TestClient) -> None:
    without_body = client.patch("/api/workshops/999")
    unknown_field = client.patch("/api/workshops/999", json={"colour": "x"})
    missing_moment = client.patch("/api/moments/3", json={"timestamp": None})

    assert without_body.status_code == 404
    assert without_body.json() == {"message": "Workshop niet gevonden"}
    assert unknown_field.status_code == 404
    assert unknown_field.json() == {"message": "Workshop niet gevonden"}
    assert missing_moment.status_code == 404
    assert missing_moment.json() == {"message": "Gemarkeerd moment niet gevonden"}


def test_patch_existing_record_without_body_is_rejected(client: TestClient) -> None:
    client.post("/api/workshops", json={"title": "Lego"})

    response = client.patch("/api/workshops/1")

    assert response.status_code == 400
    assert response.json() == {"message": "Ongeldige gegevens"}


def test_patch_workshop_merges_fields(client: TestClient) -> None:
    client.post("/api/workshops", json={"title": "Lego", "materials": ["blokken"]})

    response = client.patch("/api/workshops/1", json={"status": "completed"})

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "completed"
    assert body["title"] == "Lego"
    assert body["materials"] == ["blokken"]


def test_patch_with_unknown_field_is_rejected(client: TestClient) -> None:
    client.post("/api/workshops", json={"title": "Lego"})

    response = client.patch("/api/workshops/1", json={"colour": "rood"})

    assert response.status_code == 400
    assert response.json() == {"message": "Ongeldige gegevens"}
    assert client.get("/api/workshops/1").json()["title"] == "Lego"


def test_patch_with_null_required_field_is_rejected(client: TestClient) -> None:
    client.post("/api/workshops", json={"title": "Lego"})

    response = client.patch("/api/workshops/1", json={"title": None})

    assert response.status_code == 400
    assert client.get("/api/workshops/1").json()["title"] == "Lego"


def test_create_with_missing_field_stores_nothing(client: TestClient) -> None:
    response = client.post("/api/children", json={"dateOfBirth": "2018-04-01"})

    assert response.status_code == 400
    assert response.json() == {"message": "Ongeldige gegevens"}
    assert client.get("/api/children").json() == []


def test_create_with_wrong_type_is_rejected(client: TestClient) -> None:
    response = client.post(
        "/api/sessions", json={"workshopId": "geen getal", "date": "2024-03-04"}
    )

    assert response.status_code == 400
    assert client.get("/api/sessions").json() == []


def test_observation_type_must_be_known(client: TestClient) -> None:
    response = client.post(
        "/api/observations",
        json={"childId": 1, "date": "2024-03-04", "type": "Muziek", "content": "x"},
    )

    assert response.status_code == 400


def test_child_observations_are_filtered(client: TestClient) -> None:
    for child_id, content in ((1, "Deelt blokken"), (2, "Praat veel"), (1, "Klimt")):
        client.post(
            "/api/observations",
            json={
                "childId": child_id,
                "date": "2024-03-04",
                "type": "Sociaal-emotioneel",
                "content": content,
            },
        )

    response = client.get("/api/children/1/observations")

    assert response.status_code == 200
    assert [o["content"] for o in response.json()] == ["Deelt blokken", "Klimt"]
    assert client.get("/api/children/42/observations").json() == []


def test_session_recordings_and_moments(client: TestClient) -> None:
    client.post(
        "/api/recordings",
        json={"sessionId": 3, "startTime": "2024-03-04T09:00:00", "mediaType": "audio"},
    )
    client.post(
        "/api/recordings",
        json={"sessionId": 4, "startTime": "2024-03-04T10:00:00", "mediaType": "video"},
    )
    client.post("/api/moments", json={"recordingId": 1, "timestamp": 12})

    recordings = client.get("/api/sessions/3/recordings").json()
    moments = client.get("/api/recordings/1/moments").json()

    assert [r["id"] for r in recordings] == [1]
    assert recordings[0]["status"] == "recording"
    assert moments[0]["timestamp"] == 12
    assert client.get("/api/recordings/2/moments").json() == []


def test_patch_recording_and_moment(client: TestClient) -> None:
    client.post(
        "/api/recordings",
        json={"sessionId": 3, "startTime": "2024-03-04T09:00:00", "mediaType": "audio"},
    )
    client.post("/api/moments", json={"recordingId": 1, "timestamp": 12})

    recording = client.patch(
        "/api/recordings/1", json={"status": "completed", "mediaUrl": "/uploads/a"}
    )
    moment = client.patch("/api/moments/1", json={"note": "Lacht", "childIds": [2]})

    assert recording.json()["status"] == "completed"
    assert recording.json()["mediaUrl"] == "/uploads/a"
    assert moment.json()["note"] == "Lacht"
    assert moment.json()["childIds"] == [2]


def test_moment_timestamp_must_not_be_negative(client: TestClient) -> None:
    response = client.post("/api/moments", json={"recordingId": 1, "timestamp": -1})

    assert response.status_code == 400


def test_unexpected_error_returns_generic_500(
    container: AppContainer, monkeypatch: pytest.MonkeyPatch
) -> None:
    def broken(kind):  # type: ignore[no-untyped-def]
        raise RuntimeError("database gone")

    monkeypatch.setattr(container.record_service, "list_records", broken)
    client = TestClient(create_app(container), raise_server_exceptions=False)

    response = client.get("/api/children")

    assert response.status_code == 500
    assert response.json() == {"message": "Interne serverfout"}
