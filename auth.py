from functools import wraps

import jwt
import requests
from flask import current_app, g, redirect, session, url_for

from api import BearerAuth, Endpoints, auth_url, call


def role_from_token(token):
    # unverified read, only used to report the role on the login form
    try:
        payload = jwt.decode(token, options={"verify_signature": False})
    except jwt.InvalidTokenError:
        return None
    return payload.get("role")


def _reject(reason):
    current_app.logger.warning(f"Admin session rejected: {reason}")
    session.pop(current_app.config["TOKEN_SESSION_KEY"], None)
    return redirect(url_for("auth.login"))


def admin_required(f):
    """Re-check the stored token against ``/me`` before every admin view."""
    @wraps(f)
    def decorated(*args, **kwargs):
        token = session.get(current_app.config["TOKEN_SESSION_KEY"])
        if not token:
            return redirect(url_for("auth.login"))
        try:
            res = call("GET", auth_url(Endpoints.me), auth=BearerAuth(token))
            if not res.ok:
                return _reject(f"identity check returned {res.status_code}")
            data = res.json()
        except (requests.RequestException, ValueError) as e:
            return _reject(f"identity check failed ({e})")

        user = data.get("user") if isinstance(data, dict) else None
        if not isinstance(user, dict) or user.get("role") != "admin":
            return _reject("not an admin")
        g.admin_user = user
        return f(*args, **kwargs)
    return decorated
