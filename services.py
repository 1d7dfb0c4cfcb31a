import os, re, secrets, string, time
from datetime import date, datetime
from werkzeug.utils import secure_filename

from models import product_images, ref_id, ref_name, size_label


class FormError(ValueError):
    """A required admin form field is missing or malformed."""


def format_inr(value) -> str:
    amount = float(value or 0)
    if amount == int(amount):
        return f"₹{int(amount):,}"
    return f"₹{amount:,.2f}"


def now_ms() -> int:
    return int(time.time() * 1000)


def random_suffix(length=11):
    alphabet = string.ascii_lowercase + string.digits
    return ''.join(secrets.choice(alphabet) for _ in range(length))


# ---------- List filters ----------

def filter_users(users, query=""):
    q = (query or "").strip().lower()
    if not q:
        return list(users)
    return [
        u for u in users
        if q in (u.get("name") or "").lower() or q in (u.get("email") or "").lower()
    ]


def filter_products(products, query="", category="", subcategory=""):
    q = (query or "").strip().lower()
    result = []
    for p in products:
        match_search = not q or any(
            q in text.lower()
            for text in (p.get("name") or "", ref_name(p.get("category")), ref_name(p.get("subcategory")))
        )
        match_cat = not category or ref_id(p.get("category")) == category
        match_sub = not subcategory or ref_id(p.get("subcategory")) == subcategory
        if match_search and match_cat and match_sub:
            result.append(p)
    return result


def filter_orders(orders, status="all"):
    if not status or status == "all":
        return list(orders)
    return [o for o in orders if o.get("status") == status]


# ---------- Dashboard ----------

def _local_time(value):
    if not value:
        return None
    try:
        stamp = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None
    if stamp.tzinfo is not None:
        stamp = stamp.astimezone()
    return stamp


def _local_date(value):
    stamp = _local_time(value)
    return stamp.date() if stamp else None


def format_timestamp(value, with_time=False):
    stamp = _local_time(value)
    if stamp is None:
        return "-"
    return stamp.strftime("%d/%m/%Y %H:%M" if with_time else "%d/%m/%Y")


def todays_orders(orders, today=None):
    today = today or date.today()
    return [o for o in orders if _local_date(o.get("created_at")) == today]


def dashboard_stats(users, products, orders, today=None):
    today_list = todays_orders(orders, today)
    return {
        "users": len(users),
        "products": len(products),
        "today_orders": len(today_list),
        "today_collection": sum(o.get("total") or 0 for o in today_list),
        "orders": today_list,
    }


# ---------- Product form ----------

def split_images(text):
    return [s.strip() for s in re.split(r"[\n,]", text or "") if s.strip()]


def sizes_text(product) -> str:
    sizes = (product or {}).get("sizes") or []
    return ", ".join(label for label in (size_label(s) for s in sizes) if label)


def product_form_defaults(product=None, categories=None):
    """Initial form values: blank for a new product, filled in for an edit."""
    if product is None:
        first = categories[0] if categories else {}
        return {
            "name": "", "description": "", "price": "", "stock": "0",
            "category": first.get("_id", ""), "subcategory": "",
            "images": "", "sizes": "", "material": "", "brand": "",
            "unit": "piece", "status": "active",
        }
    return {
        "name": product.get("name") or "",
        "description": product.get("description") or "",
        "price": str(product.get("price", "")),
        "stock": str(product.get("stock") or 0),
        "category": ref_id(product.get("category")),
        "subcategory": ref_id(product.get("subcategory")),
        "images": "\n".join(product_images(product)),
        "sizes": sizes_text(product),
        "material": product.get("material") or "",
        "brand": product.get("brand") or "",
        "unit": product.get("unit") or "piece",
        "status": product.get("status") or "active",
    }


def build_product_payload(form, existing=None, extra_images=(), stamp=None):
    """Turn the submitted product form into the backend's JSON body.

    Blank optional fields are left out. Each size keeps the id of the size
    at the same position on ``existing`` when there is one, otherwise a
    synthetic ``size_<ms>_<i>`` id is minted.
    """
    name = (form.get("name") or "").strip()
    category = (form.get("category") or "").strip()
    price_str = (form.get("price") or "").strip()
    if not name or not category or not price_str:
        raise FormError("Please fill out all required fields.")
    try:
        price = float(price_str)
    except ValueError:
        raise FormError("Price must be a number.")

    try:
        stock = int(form.get("stock") or 0)
    except ValueError:
        stock = 0

    stamp = now_ms() if stamp is None else stamp
    old_sizes = (existing or {}).get("sizes") or []
    product_id = existing.get("_id") if existing else None
    sizes = []
    names = [s.strip() for s in (form.get("sizes") or "").split(",") if s.strip()]
    for i, size_name in enumerate(names):
        old = old_sizes[i] if i < len(old_sizes) else None
        sizes.append({
            "name": size_name,
            "id": (old.get("id") if isinstance(old, dict) else None) or f"size_{stamp}_{i}",
            "productId": product_id,
        })

    body = {
        "name": name,
        "price": price,
        "category": category,
        "stock": stock,
        "unit": form.get("unit") or "piece",
        "status": form.get("status") or "active",
    }
    for key in ("description", "material", "brand", "subcategory"):
        value = (form.get(key) or "").strip()
        if value:
            body[key] = value
    images = split_images(form.get("images")) + list(extra_images)
    if images:
        body["images"] = images
    if sizes:
        body["sizes"] = sizes
    return body


# ---------- Uploads ----------

def save_images(files, folder):
    """Write the image parts of ``files`` into ``folder``.

    Parts whose MIME type is not ``image/*`` are skipped. Returns the
    public ``/uploads/<name>`` path of every file written.
    """
    os.makedirs(folder, exist_ok=True)
    urls = []
    for storage in files:
        if not (storage.mimetype or "").startswith("image/"):
            continue
        ext = os.path.splitext(secure_filename(storage.filename or ""))[1] or ".jpg"
        filename = f"{now_ms()}_{random_suffix()}{ext}"
        storage.save(os.path.join(folder, filename))
        urls.append(f"/uploads/{filename}")
    return urls
