"""Avatar URLs — Gravatar-style URLs derived from a member's e-mail address.

Invariants:
    - Pure: same e-mail and settings always produce the same URLs
    - Keys are the pixel sizes as strings ("24", "48", "96")
    - The e-mail is trimmed and lower-cased before hashing
"""

import hashlib
from urllib.parse import urlencode

AVATAR_SIZES = (24, 48, 96)


def email_hash(email: str) -> str:
    normalized = (email or "").strip().lower().encode("utf-8")
    return hashlib.md5(normalized, usedforsecurity=False).hexdigest()


def avatar_urls(
    email: str,
    base_url: str = "https://secure.gravatar.com/avatar",
    default: str = "mm",
    rating: str = "g",
    sizes: tuple[int, ...] = AVATAR_SIZES,
) -> dict[str, str]:
    """Avatar URL per size for one e-mail address."""
    digest = email_hash(email)
    base = base_url.rstrip("/")
    return {
        str(size): f"{base}/{digest}?{urlencode({'s': size, 'd': default, 'r': rating})}"
        for size in sizes
    }
