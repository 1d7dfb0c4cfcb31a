# routes_admin.py
from flask import (
    Blueprint, render_template, request, redirect, url_for,
    flash, jsonify, current_app
)
import requests

from api import Endpoints, api_origin, api_url, call, error_message, fetch_list
from auth import admin_required
from models import (
    ORDER_STATUSES, PRODUCT_STATUSES, PRODUCT_UNITS, USER_ROLES,
    format_address, image_url, product_images, ref_id, ref_name, screenshot_url, short_id
)
from services import (
    FormError, build_product_payload, dashboard_stats, filter_orders,
    filter_products, filter_users, format_inr, format_timestamp,
    product_form_defaults, save_images, sizes_text
)

bp = Blueprint("admin", __name__, url_prefix="/admin")


def _send(method, path, failure, backend_message=False, **kwargs):
    """Run a mutation against the backend; flash ``failure`` if it does not succeed."""
    try:
        res = call(method, api_url(path), **kwargs)
    except requests.RequestException:
        current_app.logger.exception(f"{method} {path} failed")
        flash(failure, "error")
        return False
    if not res.ok:
        flash(error_message(res, failure) if backend_message else failure, "error")
        return False
    return True


def _find(records, record_id):
    if not record_id:
        return None
    return next((r for r in records if r.get("_id") == record_id), None)


# ---------- Dashboard ----------

@bp.route("")
@admin_required
def dashboard():
    users = fetch_list(Endpoints.users, "users", "data")
    products = fetch_list(Endpoints.products)
    orders = fetch_list(Endpoints.orders)
    return render_template("admin/dashboard.html", stats=dashboard_stats(users, products, orders))


# ---------- Users ----------

@bp.route("/users")
@admin_required
def users():
    query = request.args.get("q", "")
    users = fetch_list(Endpoints.users, "users", "data")
    return render_template(
        "admin/users.html",
        users=filter_users(users, query),
        query=query,
        edit=_find(users, request.args.get("edit")),
        roles=USER_ROLES,
    )


@bp.route("/users/<user_id>", methods=["POST"])
@admin_required
def update_user(user_id):
    name = (request.form.get("name") or "").strip()
    email = (request.form.get("email") or "").strip()
    phone = (request.form.get("phone") or "").strip()
    role = request.form.get("role") or "customer"

    if not name or not email:
        flash("Please fill out all required fields.", "error")
        return redirect(url_for("admin.users", edit=user_id))
    if role not in USER_ROLES:
        flash("Invalid role selected.", "error")
        return redirect(url_for("admin.users", edit=user_id))

    body = {"name": name, "email": email, "phone": phone, "role": role}
    if not _send("PUT", Endpoints.user(user_id), "Update failed", json=body):
        return redirect(url_for("admin.users", edit=user_id))
    flash(f"User {name} updated.", "success")
    return redirect(url_for("admin.users"))


@bp.route("/users/<user_id>/delete", methods=["POST"])
@admin_required
def delete_user(user_id):
    if _send("DELETE", Endpoints.user(user_id), "Delete failed"):
        flash("User deleted.", "success")
    return redirect(url_for("admin.users"))


# ---------- Products ----------

def _subcategories(category_id):
    if not category_id:
        return []
    return fetch_list(Endpoints.subcategories(category_id), "data", "subcategories")


def _products_page(form=None, form_product=None, adding=False):
    query = request.args.get("q", "")
    category = request.args.get("category", "")
    # the subcategory filter only applies inside a chosen category
    subcategory = request.args.get("subcategory", "") if category else ""

    products = fetch_list(Endpoints.products)
    categories = fetch_list(Endpoints.categories)

    if form is None:
        if request.args.get("add"):
            adding = True
            form = product_form_defaults(None, categories)
        else:
            form_product = _find(products, request.args.get("edit"))
            if form_product is not None:
                form = product_form_defaults(form_product)

    return render_template(
        "admin/products.html",
        products=filter_products(products, query, category, subcategory),
        categories=categories,
        subcategories=_subcategories(category),
        query=query,
        filter_category=category,
        filter_subcategory=subcategory,
        form=form,
        form_product=form_product,
        adding=adding,
        form_subcategories=_subcategories(form.get("category")) if form else [],
        units=PRODUCT_UNITS,
        statuses=PRODUCT_STATUSES,
    )


@bp.route("/products")
@admin_required
def products():
    return _products_page()


def _save_product(existing=None):
    uploaded = []
    files = request.files.getlist("files")
    if files:
        try:
            uploaded = save_images(files, current_app.config["UPLOAD_FOLDER"])
        except OSError:
            current_app.logger.exception("Saving product images failed")
            flash("Upload failed", "error")
    base = request.host_url.rstrip("/")
    new_urls = [u if u.startswith("http") else base + u for u in uploaded]

    form = request.form.to_dict()
    try:
        body = build_product_payload(form, existing, new_urls)
    except FormError as e:
        flash(str(e), "error")
        form["images"] = "\n".join(filter(None, [form.get("images", "").strip()] + new_urls))
        return _products_page(form=form, form_product=existing, adding=existing is None)

    if existing is None:
        ok = _send("POST", Endpoints.create_product, "Failed to save", json=body)
    else:
        ok = _send("PUT", Endpoints.update_product(existing["_id"]), "Failed to save", json=body)
    if not ok:
        return _products_page(form=form, form_product=existing, adding=existing is None)

    flash(f"Product {body['name']} saved.", "success")
    return redirect(url_for("admin.products"))


@bp.route("/products", methods=["POST"])
@admin_required
def create_product():
    return _save_product()


@bp.route("/products/<product_id>", methods=["POST"])
@admin_required
def update_product(product_id):
    existing = _find(fetch_list(Endpoints.products), product_id) or {"_id": product_id}
    return _save_product(existing)


@bp.route("/products/<product_id>/delete", methods=["POST"])
@admin_required
def delete_product(product_id):
    if _send("DELETE", Endpoints.delete_product(product_id), "Delete failed"):
        flash("Product deleted.", "success")
    return redirect(url_for("admin.products"))


@bp.route("/categories", methods=["POST"])
@admin_required
def create_category():
    name = (request.form.get("name") or "").strip()
    if not name:
        flash("Category name is required.", "error")
    elif _send("POST", Endpoints.create_category, "Failed to create category",
               backend_message=True, json={"name": name}):
        flash(f"Category {name} created.", "success")
    return redirect(url_for("admin.products"))


@bp.route("/subcategories", methods=["POST"])
@admin_required
def create_subcategory():
    name = (request.form.get("name") or "").strip()
    category = (request.form.get("category") or "").strip()
    if not name or not category:
        flash("Subcategory name and category are required.", "error")
    elif _send("POST", Endpoints.create_subcategory, "Failed to create subcategory",
               backend_message=True, json={"name": name, "category": category}):
        flash(f"Subcategory {name} created.", "success")
    return redirect(url_for("admin.products", category=request.form.get("filter_category") or None))


@bp.route("/subcategories/<category_id>")
@admin_required
def subcategories(category_id):
    # feeds the product form's subcategory select when its category changes
    return jsonify({"data": _subcategories(category_id)})


# ---------- Orders ----------

@bp.route("/orders")
@admin_required
def orders():
    status = request.args.get("status", "all") or "all"
    orders = fetch_list(Endpoints.orders)
    return render_template(
        "admin/orders.html",
        orders=filter_orders(orders, status),
        status=status,
        statuses=ORDER_STATUSES,
        detail=_find(orders, request.args.get("detail")),
    )


@bp.route("/orders/<order_id>/status", methods=["POST"])
@admin_required
def update_order_status(order_id):
    new_status = (request.form.get("status") or "").strip().lower()
    if new_status not in ORDER_STATUSES:
        flash("Invalid status selected.", "error")
    elif _send("PUT", Endpoints.order_status(order_id), "Update failed", json={"status": new_status}):
        flash(f'Order #{order_id[-6:]} status updated to "{new_status}".', "success")

    current = request.form.get("filter")
    return redirect(url_for("admin.orders", status=current if current and current != "all" else None))


# ---------- Settings ----------

@bp.route("/settings")
@admin_required
def settings():
    return render_template("admin/settings.html", api_url=current_app.config["API_URL"])


# ---------- Template helpers ----------

NAV_LINKS = [
    ("admin.dashboard", "Dashboard"),
    ("admin.users", "Users"),
    ("admin.products", "Products"),
    ("admin.orders", "Orders"),
    ("admin.settings", "Settings"),
]


@bp.app_context_processor
def inject_helpers():
    def asset_url(path):
        return image_url(path, api_origin())

    def payment_screenshot_url(path):
        return screenshot_url(path, api_origin())

    return dict(
        nav_links=NAV_LINKS,
        format_inr=format_inr,
        format_timestamp=format_timestamp,
        format_address=format_address,
        ref_id=ref_id,
        ref_name=ref_name,
        short_id=short_id,
        sizes_text=sizes_text,
        product_images=product_images,
        asset_url=asset_url,
        payment_screenshot_url=payment_screenshot_url,
    )
