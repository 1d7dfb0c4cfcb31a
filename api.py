"""Shared HTTP client for the e-commerce backend.

Every view talks to the backend through the ``requests.Session`` returned
by :func:`get_client`. The session carries a :class:`BearerAuth` hook that
stamps the admin token from the Flask session onto each outgoing request.
"""
import re

import requests
from requests.auth import AuthBase
from flask import current_app, g, session


class Endpoints:
    login = "/login"
    me = "/me"
    users = "/users"
    products = "/products"
    create_product = "/product/create"
    categories = "/categories"
    create_category = "/category/create"
    create_subcategory = "/subcategory/create"
    orders = "/orders/all"

    @staticmethod
    def user(user_id):
        return f"/users/{user_id}"

    @staticmethod
    def update_product(product_id):
        return f"/product/update/{product_id}"

    @staticmethod
    def delete_product(product_id):
        return f"/product/delete/{product_id}"

    @staticmethod
    def subcategories(category_id):
        return f"/subcategories/category/{category_id}"

    @staticmethod
    def order_status(order_id):
        return f"/orders/{order_id}/status"


class BearerAuth(AuthBase):
    """Adds ``Authorization: Bearer <token>`` when a token is available.

    With no explicit token the admin token is read from the Flask session
    each time a request is prepared.
    """

    def __init__(self, token=None):
        self.token = token

    def __call__(self, r):
        token = self.token or session.get(current_app.config["TOKEN_SESSION_KEY"])
        if token:
            r.headers["Authorization"] = f"Bearer {token}"
        return r


def new_session():
    s = requests.Session()
    s.headers.update({"Content-Type": "application/json"})
    s.auth = BearerAuth()
    return s


def get_client():
    if "api_client" not in g:
        g.api_client = new_session()
    return g.api_client


def close_client(exc=None):
    client = g.pop("api_client", None)
    if client is not None:
        client.close()


def api_url(path):
    return current_app.config["API_URL"].rstrip("/") + path


def api_origin():
    origin = current_app.config.get("API_ORIGIN")
    if origin:
        return origin.rstrip("/")
    return re.sub(r"/api/?$", "", current_app.config["API_URL"])


def auth_url(path):
    return api_origin() + path


def call(method, url, **kwargs):
    kwargs.setdefault("timeout", current_app.config["API_TIMEOUT"])
    return get_client().request(method, url, **kwargs)


def unwrap(payload, *keys):
    """First list found under ``keys`` in a backend response body."""
    if not isinstance(payload, dict):
        return []
    for key in keys or ("data",):
        value = payload.get(key)
        if isinstance(value, list):
            return value
    return []


def fetch_list(path, *keys):
    try:
        res = call("GET", api_url(path))
        return unwrap(res.json(), *keys)
    except (requests.RequestException, ValueError):
        current_app.logger.exception(f"Failed to load {path}")
        return []


def error_message(res, default):
    try:
        data = res.json()
    except ValueError:
        return default
    if not isinstance(data, dict):
        return default
    return data.get("message") or data.get("error") or default
