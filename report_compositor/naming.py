"""
naming.py — Report filename contract.

    {slug(client_name)}-report-{yyyyMMdd}.{ext}
"""

import re
from datetime import datetime

DEFAULT_SLUG = "client"

_APOSTROPHES = re.compile(r"['’`]")
_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def slugify(name: str | None, default: str = DEFAULT_SLUG) -> str:
    """Lowercase `name` and collapse every non-alphanumeric run to one hyphen.

    Apostrophes are dropped rather than hyphenated ("Joe's" -> "joes").
    Falls back to `default` when nothing alphanumeric remains.

    >>> slugify("Joe's Bakery & Co.")
    'joes-bakery-co'
    """
    if not name:
        return default
    text = _APOSTROPHES.sub("", name.lower())
    slug = _NON_ALNUM.sub("-", text).strip("-")
    return slug or default


def report_filename(client_name: str | None, when: datetime, ext: str = "pdf") -> str:
    return f"{slugify(client_name)}-report-{when.strftime('%Y%m%d')}.{ext}"
