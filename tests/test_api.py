import requests

from api import BearerAuth, api_origin, api_url, auth_url, error_message, fetch_list, unwrap


def test_unwrap_picks_first_list():
    assert unwrap({"users": [1], "data": [2]}, "users", "data") == [1]
    assert unwrap({"data": [2]}, "users", "data") == [2]
    assert unwrap({"data": {"not": "a list"}}) == []
    assert unwrap([1, 2]) == []


def test_urls_follow_config(app):
    with app.app_context():
        assert api_url("/products") == "http://backend.test/api/products"
        assert api_origin() == "http://backend.test"
        assert auth_url("/me") == "http://backend.test/me"

        app.config["API_ORIGIN"] = "http://auth.test/"
        assert auth_url("/login") == "http://auth.test/login"


def test_bearer_auth_explicit_token():
    req = requests.Request("GET", "http://backend.test/me").prepare()

    BearerAuth("abc")(req)

    assert req.headers["Authorization"] == "Bearer abc"


def test_bearer_auth_reads_session_token(app):
    req = requests.Request("GET", "http://backend.test/api/users").prepare()
    with app.test_request_context():
        from flask import session
        session["admin_token"] = "from-session"
        BearerAuth()(req)

    assert req.headers["Authorization"] == "Bearer from-session"


def test_bearer_auth_without_token_leaves_header_off(app):
    req = requests.Request("GET", "http://backend.test/api/users").prepare()
    with app.test_request_context():
        BearerAuth()(req)

    assert "Authorization" not in req.headers


def test_fetch_list_returns_empty_on_error(app, backend):
    backend.add("GET", "/api/products", requests.Timeout("slow"))
    with app.test_request_context():
        assert fetch_list("/products") == []


def test_fetch_list_subcategory_keys(app, backend):
    backend.add("GET", "/api/subcategories/category/c1", {"subcategories": [{"_id": "s1"}]})
    with app.test_request_context():
        assert fetch_list("/subcategories/category/c1", "data", "subcategories") == [{"_id": "s1"}]


def test_error_message_prefers_message_then_error():
    res = requests.Response()
    res._content = b'{"error": "exists"}'
    res.encoding = "utf-8"
    assert error_message(res, "fallback") == "exists"

    res._content = b"<html>oops</html>"
    assert error_message(res, "fallback") == "fallback"
