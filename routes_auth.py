import requests
from flask import (
    Blueprint, render_template, request, redirect, url_for,
    session, current_app
)

from api import Endpoints, auth_url, call
from auth import role_from_token

bp = Blueprint("auth", __name__)


@bp.route("/")
def index():
    return redirect(url_for("auth.login"))


def _attempt_login(email, password):
    """Log in against the backend. Returns an error message, or "" on success."""
    try:
        res = call("POST", auth_url(Endpoints.login), json={"email": email, "password": password})
    except requests.RequestException:
        current_app.logger.exception("Login request failed")
        return "Network error. Is backend running?"

    try:
        data = res.json()
    except ValueError:
        data = None
    if not isinstance(data, dict):
        data = {}

    if not res.ok:
        return data.get("message") or "Login failed"
    token = data.get("token")
    if not token:
        return "Invalid response"

    user = data.get("user")
    role = (user.get("role") if isinstance(user, dict) else None) or role_from_token(token)
    if role != "admin":
        return "Admin access only. Your role: " + (role or "customer")

    session[current_app.config["TOKEN_SESSION_KEY"]] = token
    return ""


@bp.route("/admin/login", methods=["GET", "POST"])
def login():
    error = ""
    email = ""
    if request.method == "POST":
        email = (request.form.get("email") or "").strip()
        password = request.form.get("password") or ""
        if not email or not password:
            error = "Please enter both email and password."
        else:
            error = _attempt_login(email, password)
            if not error:
                return redirect(url_for("admin.dashboard"))

    return render_template("admin/login.html", error=error, email=email)


@bp.route("/admin/logout", methods=["GET", "POST"])
def logout():
    session.pop(current_app.config["TOKEN_SESSION_KEY"], None)
    return redirect(url_for("auth.login"))
