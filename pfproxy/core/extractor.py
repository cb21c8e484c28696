"""Avatar extraction from embedded page state and meta tags.

Everything here is pure: callers hand in text already read from the page and
get back either an avatar URL or None. A None means "try the next strategy",
never an error.
"""

import json
from collections import deque
from typing import Any

# Field names in the rehydration payload, most preferred resolution first
AVATAR_KEYS = ("avatarLarger", "avatarMedium", "avatarThumb")

# Shorter strings are placeholders, not URLs
MIN_AVATAR_LENGTH = 10

# Escape sequences the page leaves in serialized URLs
_ESCAPES = (
    ("\\u002F", "/"),
    ("\\u0026", "&"),
    ("\\/", "/"),
)


def parse_state(text: str | None) -> Any | None:
    """Parse the embedded state blob, returning None for empty or malformed text."""
    if not text:
        return None
    try:
        return json.loads(text)
    except ValueError:
        return None


def find_avatar(state: Any) -> str | None:
    """
    Breadth-first search of a JSON tree for the first avatar field.

    Keys are visited in insertion order within each object, so a shallower
    match always beats a deeper one and, at equal depth, the earlier key wins.

    Args:
        state: Parsed JSON value (dict, list or scalar)

    Returns:
        Avatar URL string or None if no acceptable field exists
    """
    queue = deque([state])

    while queue:
        node = queue.popleft()
        if isinstance(node, dict):
            items = node.items()
        elif isinstance(node, list):
            items = enumerate(node)
        else:
            continue

        for key, value in items:
            if key in AVATAR_KEYS and isinstance(value, str) and len(value) > MIN_AVATAR_LENGTH:
                return value
            if isinstance(value, (dict, list)):
                queue.append(value)

    return None


def extract_from_state(text: str | None) -> str | None:
    """Structured-state strategy: parse the blob and search it."""
    state = parse_state(text)
    if state is None:
        return None
    return find_avatar(state)


def normalize_url(url: str | None) -> str | None:
    """Trim and turn a protocol-relative URL into an https one."""
    if not url:
        return None
    url = str(url).strip()
    if not url:
        return None
    if url.startswith("//"):
        url = "https:" + url
    return url


def clean_avatar_url(raw: str | None) -> str | None:
    """
    Undo the page's URL escaping and normalize the scheme.

    Args:
        raw: Avatar value from either strategy

    Returns:
        Absolute URL, or None if nothing usable remains
    """
    if not raw:
        return None
    for escaped, plain in _ESCAPES:
        raw = raw.replace(escaped, plain)
    return normalize_url(raw)
