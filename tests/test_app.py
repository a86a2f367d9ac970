import io
import json

from quotevault.utils.logger import configure_logging


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_root(client):
    response = client.get("/")

    assert response.status_code == 200
    assert response.json()["success"] is True


def test_unknown_route_uses_error_envelope(client):
    response = client.get("/api/nothing-here")

    assert response.status_code == 404
    assert response.json() == {
        "success": False,
        "error": {"code": "NOT_FOUND", "message": "Not Found"},
    }


def test_wrong_method(client):
    response = client.patch("/api/quotes")

    assert response.status_code == 405
    assert response.json()["error"]["code"] == "METHOD_NOT_ALLOWED"


def test_app_state(app, settings, store):
    assert app.state.settings is settings
    assert app.state.store is store


def test_openapi_documents_error_envelope(client):
    schema = client.get("/openapi.json").json()

    assert "ErrorResponse" in schema["components"]["schemas"]
    assert "404" in schema["paths"]["/api/quotes/{quote_id}"]["get"]["responses"]


def test_responses_carry_a_request_id(client):
    generated = client.get("/health").headers["X-Request-ID"]
    assert len(generated) == 24

    echoed = client.get("/health", headers={"X-Request-ID": "trace-42"})
    assert echoed.headers["X-Request-ID"] == "trace-42"

    replaced = client.get("/health", headers={"X-Request-ID": "not a valid id!"})
    assert replaced.headers["X-Request-ID"] != "not a valid id!"


def test_failed_requests_are_logged_with_their_id(client):
    stream = io.StringIO()
    configure_logging(stream=stream)

    response = client.get("/api/quotes/507f1f77bcf86cd799439011", headers={"X-Request-ID": "trace-404"})

    access = [
        entry for entry in map(json.loads, stream.getvalue().splitlines())
        if entry.get("status_code") == 404
    ]
    assert response.status_code == 404
    assert access[0]["request_id"] == "trace-404"
    assert access[0]["path"] == "/api/quotes/507f1f77bcf86cd799439011"
