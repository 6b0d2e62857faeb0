from fastapi import status
from fastapi.testclient import TestClient

from gradebook.main import create_app


def test_health(client):
    response = client.get("/health")
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"status": "ok"}


def test_body_validation_errors_are_400(client, headers):
    response = client.post(
        "/api/grades",
        json={"subject_id": "abc", "grades": []},
        headers=headers["teacher"],
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert "message" in response.json()


def test_unknown_route_uses_message_shape(client):
    response = client.get("/api/nowhere")
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json() == {"message": "Not Found"}


def test_unexpected_errors_are_not_leaked():
    app = create_app()

    @app.get("/boom")
    def boom():
        raise RuntimeError("database password is hunter2")

    client = TestClient(app, raise_server_exceptions=False)
    response = client.get("/boom")
    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.json() == {"message": "Server error"}
