import json
from urllib.parse import urlsplit

import pytest
import requests
from requests.adapters import BaseAdapter

import api
from app import create_app
from config import TestConfig


class FakeBackend(BaseAdapter):
    """Transport adapter standing in for the e-commerce backend.

    Routes are keyed by (method, path). A route body may be a dict, a
    callable taking the prepared request, or an exception to raise.
    """

    def __init__(self):
        super().__init__()
        self.routes = {}
        self.calls = []

    def add(self, method, path, body=None, status=200):
        self.routes[(method, path)] = (status, body)

    def requests_to(self, method, path):
        return [r for r in self.calls if r.method == method and urlsplit(r.url).path == path]

    def send(self, request, **kwargs):
        self.calls.append(request)
        path = urlsplit(request.url).path
        status, body = self.routes.get((request.method, path), (404, {"message": "Not found"}))
        if isinstance(body, Exception):
            raise body
        if callable(body):
            status, body = body(request)

        res = requests.Response()
        res.status_code = status
        res._content = json.dumps(body).encode("utf-8")
        res.encoding = "utf-8"
        res.headers["Content-Type"] = "application/json"
        res.url = request.url
        res.request = request
        return res

    def close(self):
        pass


@pytest.fixture
def backend(monkeypatch):
    fake = FakeBackend()
    make_session = api.new_session

    def session_with_fake_backend():
        s = make_session()
        s.mount("http://", fake)
        s.mount("https://", fake)
        return s

    monkeypatch.setattr(api, "new_session", session_with_fake_backend)
    return fake


@pytest.fixture
def app(tmp_path):
    app = create_app(TestConfig)
    app.config["UPLOAD_FOLDER"] = str(tmp_path / "uploads")
    return app


@pytest.fixture
def client(app, backend):
    return app.test_client()


@pytest.fixture
def admin_client(client, backend):
    """A client whose session token is accepted as an admin by /me."""
    backend.add("GET", "/me", {"user": {"_id": "u1", "name": "Root", "role": "admin"}})
    with client.session_transaction() as sess:
        sess["admin_token"] = "tok"
    return client
