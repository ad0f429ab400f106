def preflight(client, origin):
    return client.options(
        "/api/services",
        headers={"Origin": origin, "Access-Control-Request-Method": "GET"}
    )



def test_cors_allows_site_origin(client):
    response = preflight(client, "http://localhost:8000")
    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "http://localhost:8000"
    assert response.headers["access-control-allow-credentials"] == "true"


def test_cors_refuses_foreign_origin(client):
    response = preflight(client, "http://evil.example")
    assert response.status_code == 400
    assert "access-control-allow-origin" not in response.headers
