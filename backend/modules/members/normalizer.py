"""
Webhook payload normalization.

Automation tools (GoHighLevel, Make.com, Zapier) name the same field in
different ways and sometimes wrap the body under ``data`` or ``fields``.
Each canonical field has an ordered list of candidate keys; the first
non-empty candidate wins.

Latitude and longitude are not handled here. Callers read them with
``read_coordinates`` since they use a separate key set.
"""

from typing import Any, Mapping, Optional

from .models import MemberSource, PetStatus, PetType, WebhookPayload


WRAPPER_KEYS = ("data", "fields")

FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "pet_name": ("petName", "pet_name", "Pet Name", "pet-name"),
    "pet_type": ("petType", "pet_type", "Pet Type", "pet-type"),
    "pet_status": ("petStatus", "pet_status", "Pet Status", "pet-status"),
    "city": ("city", "City"),
    "state": ("state", "State", "province", "Province"),
    "country": ("country", "Country"),
    "email": ("email", "Email", "email_address", "Email Address"),
    "first_name": ("firstName", "first_name", "First Name", "first-name"),
    "affiliate_id": ("affiliateId", "affiliate_id", "am_id"),
    "location_name": ("locationName", "location_name", "Location Name"),
}

FIELD_DEFAULTS: dict[str, str] = {
    "pet_type": PetType.OTHER.value,
    "pet_status": PetStatus.WITH_YOU.value,
}

LATITUDE_KEYS = ("latitude", "lat")
LONGITUDE_KEYS = ("longitude", "lng", "lon")


def unwrap(raw: Mapping[str, Any]) -> Mapping[str, Any]:
    """Return the nested ``data``/``fields`` object if present, else the body."""
    for key in WRAPPER_KEYS:
        nested = raw.get(key)
        if isinstance(nested, Mapping):
            return nested
    return raw


def _is_empty(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def first_present(data: Mapping[str, Any], keys: tuple[str, ...]) -> Optional[Any]:
    """First non-empty value among ``keys``, or None."""
    for key in keys:
        value = data.get(key)
        if not _is_empty(value):
            return value
    return None


def resolve_field(data: Mapping[str, Any], field: str) -> str:
    """
    Resolve one canonical field from an already-unwrapped body.

    Args:
        data: Flat webhook data
        field: Canonical field name (a key of FIELD_ALIASES)

    Returns:
        The first non-empty candidate as a stripped string, else the
        field's default (empty for fields without one)
    """
    value = first_present(data, FIELD_ALIASES[field])
    if value is None:
        return FIELD_DEFAULTS.get(field, "")
    return str(value).strip()


def _resolve_source(raw: Mapping[str, Any]) -> MemberSource:
    value = str(raw.get("source") or "").strip().lower()
    known = {source.value for source in MemberSource}
    return MemberSource(value) if value in known else MemberSource.WEBHOOK


def normalize_webhook_payload(raw: Mapping[str, Any]) -> WebhookPayload:
    """
    Map a loosely-structured webhook body to canonical member fields.

    Missing required fields are left empty; validation happens later.
    """
    data = unwrap(raw)
    values = {field: resolve_field(data, field) for field in FIELD_ALIASES}
    return WebhookPayload(source=_resolve_source(raw), **values)


def read_coordinates(raw: Mapping[str, Any]) -> tuple[Optional[Any], Optional[Any]]:
    """
    Read raw latitude/longitude from a webhook body.

    Top-level keys take precedence over keys inside a ``data``/``fields``
    wrapper. Values are returned unparsed.
    """
    data = unwrap(raw)
    latitude = first_present(raw, LATITUDE_KEYS)
    if latitude is None and data is not raw:
        latitude = first_present(data, LATITUDE_KEYS)
    longitude = first_present(raw, LONGITUDE_KEYS)
    if longitude is None and data is not raw:
        longitude = first_present(data, LONGITUDE_KEYS)
    return latitude, longitude
