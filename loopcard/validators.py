"""Validation predicates for profile records.

All predicates are pure functions of strings and never raise. They are
deliberately permissive: a phone number only needs five digits somewhere and
an email only needs an ``x@y.z`` shape.
"""

import re

REQUIRED_FIELDS = (
    "business_name",
    "full_name",
    "phone",
    "whatsapp",
    "email",
    "bio",
    "slug",
)

MIN_PHONE_DIGITS = 5

_DIGIT_RE = re.compile(r"[0-9]")
_NON_DIGIT_RE = re.compile(r"[^0-9]")
_SLUG_STRIP_RE = re.compile(r"[^a-zA-Z0-9-]")
_EMAIL_DOMAIN_RE = re.compile(r".+\..+")
_HEX_COLOR_RE = re.compile(r"#[0-9a-fA-F]{6}")


def has_required_fields(record) -> bool:
    """True iff every required field of ``record`` is a non-empty string."""
    for name in REQUIRED_FIELDS:
        value = getattr(record, name, "")
        if not isinstance(value, str) or not value:
            return False
    return True


def is_phone_shaped(value: str) -> bool:
    """True iff ``value`` contains at least five ASCII digits anywhere."""
    return len(_DIGIT_RE.findall(value)) >= MIN_PHONE_DIGITS


def is_email_shaped(value: str) -> bool:
    """True iff ``value`` looks like ``local@domain.tld``.

    Exactly one ``@`` with a non-empty local part, and a domain with
    non-empty text on both sides of a dot.
    """
    local, sep, domain = value.partition("@")
    if not sep or not local or "@" in domain:
        return False
    return _EMAIL_DOMAIN_RE.fullmatch(domain) is not None


def is_complete(record) -> bool:
    """Completeness gate: required fields present and contact shapes valid."""
    return (
        has_required_fields(record)
        and is_phone_shaped(record.phone)
        and is_phone_shaped(record.whatsapp)
        and is_email_shaped(record.email)
    )


def normalize_slug(value: str) -> str:
    """Strip everything outside ``[a-zA-Z0-9-]``, then lowercase.

    >>> normalize_slug("Vishnu_Vardhan!!")
    'vishnuvardhan'
    """
    return _SLUG_STRIP_RE.sub("", value).lower()


def whatsapp_digits(value: str) -> str:
    """ASCII digits only, as used in ``wa.me`` links."""
    return _NON_DIGIT_RE.sub("", value)


def is_hex_color(value: str) -> bool:
    return _HEX_COLOR_RE.fullmatch(value) is not None


def normalize_hex_color(value, fallback: str) -> str:
    """Return ``value`` as a lowercase ``#rrggbb`` colour, or ``fallback``."""
    if isinstance(value, str):
        value = value.strip()
        if value and not value.startswith("#"):
            value = "#" + value
        if is_hex_color(value):
            return value.lower()
    return fallback
