"""Vocabulary and accessors for the records mirrored from the backend.

The backend owns every entity; here they are plain dicts and nothing is
validated beyond what the admin forms require.
"""

USER_ROLES = ["customer", "admin"]

ORDER_STATUSES = ["pending", "processing", "shipped", "delivered", "cancelled"]

PRODUCT_UNITS = ["piece", "bottle", "kg", "sheet"]
PRODUCT_STATUSES = ["active", "inactive"]


def ref_id(value):
    """Id of a category/subcategory reference, embedded or not."""
    if isinstance(value, dict):
        return value.get("_id") or ""
    return value or ""


def ref_name(value):
    if not value:
        return ""
    if isinstance(value, dict):
        return value.get("name") or ""
    return str(value)


def short_id(record) -> str:
    return str(record.get("_id", ""))[-6:]


def size_label(size) -> str:
    if isinstance(size, dict):
        return size.get("name") or size.get("size") or size.get("label") or ""
    return str(size or "")


def image_url(path, base: str) -> str:
    # bare file names are stored relative to the backend's uploads folder
    if not path:
        return ""
    if path.startswith("http"):
        return path
    if not path.startswith("/"):
        path = f"/uploads/{path}"
    return f"{base}{path}"


def screenshot_url(path, base: str) -> str:
    if not path or path.startswith("http"):
        return path or ""
    return f"{base}{'' if path.startswith('/') else '/'}{path}"


def format_address(shipping) -> str:
    shipping = shipping or {}
    parts = [shipping.get(k) for k in ("address", "city", "state", "pincode")]
    return ", ".join(p for p in parts if p)


def product_images(product) -> list:
    images = (product or {}).get("images")
    return images if isinstance(images, list) else []
