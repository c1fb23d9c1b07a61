############################################################
#
# xarwiz-cms - Marketing Site Content Backend
#
# slugs.py: URL slug helpers
#
############################################################

"""URL slug helpers."""

import re
from typing import Iterable, List, Optional

from backend.app.core.errors import ValidationError


def slugify(title: str) -> str:
    """Generate a URL slug from a title."""
    slug = title.lower().strip()
    slug = re.sub(r"[^\w\s-]", "", slug)
    slug = re.sub(r"[-\s_]+", "-", slug)
    return slug.strip("-")


def resolve_slug(slug: Optional[str], fallback: str) -> str:
    """Use the given slug, or derive one from ``fallback`` when it is blank."""
    if slug and slug.strip():
        return slugify(slug)
    return slugify(fallback)


def require_slug(slug: Optional[str], fallback: str) -> str:
    """Like ``resolve_slug``, but reject a result with no usable characters."""
    resolved = resolve_slug(slug, fallback)
    if not resolved:
        raise ValidationError("slug could not be derived; use letters or digits")
    return resolved


def dedupe_by_slug(items: Iterable[dict]) -> List[dict]:
    """Drop repeated ``{name, slug}`` entries, keeping first occurrence order."""
    seen = set()
    result = []
    for item in items:
        slug = item["slug"]
        if slug in seen:
            continue
        seen.add(slug)
        result.append(item)
    return result
