"""URL slugs for catalogue records."""

import re

_NON_ALPHANUMERIC = re.compile(r"[^a-z0-9]+")


def slugify(name: str) -> str:
    """Lower-case ``name`` and collapse every non-alphanumeric run to a hyphen.

    >>> slugify("  Beaded Leather Sandals (Size 42) ")
    'beaded-leather-sandals-size-42'
    """
    return _NON_ALPHANUMERIC.sub("-", (name or "").lower().strip()).strip("-")
