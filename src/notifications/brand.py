"""Bakery identity used by every email."""

from urllib.parse import urlencode

BAKERY_BRAND = {
    "name": "Dee-licious Bakes",
    "owner": "Deanna Jones",
    "address": "The Penruddocke Arms Hindon Rd, Salisbury SP3 5EL",
    "email": "info@deeliciousbakes.co.uk",
    "website": "https://deeliciousbakes.co.uk/",
    "tagline": "Freshly baked with love",
}


def site_url(path: str, **params) -> str:
    """Absolute link into the storefront, e.g. ``site_url("verify-email", token=t)``."""
    url = BAKERY_BRAND["website"] + path.lstrip("/")
    return f"{url}?{urlencode(params)}" if params else url
