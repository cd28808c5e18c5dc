"""
URL helpers shared by the host adapter, actions and the translator.

These follow the host's query-argument semantics: adding an argument that
already exists replaces it, the fragment is kept, and a value of ``None``
or ``False`` removes the argument.
"""
from __future__ import annotations

import posixpath
import re
from typing import Any, Dict, List, Mapping, Optional, Union
from urllib.parse import parse_qsl, quote_plus, urlencode, urlsplit, urlunsplit

_KEY_RE = re.compile(r"[^a-z0-9_\-]")

# Only the entities htmlspecialchars() produces; "&reg=" and friends are
# argument separators, not character references
_SPECIAL_CHARS = {"amp": "&", "quot": '"', "#039": "'", "lt": "<", "gt": ">"}
_SPECIAL_CHARS_RE = re.compile(r"&(amp|quot|#039|lt|gt);")

QueryValue = Union[str, List[str]]


def sanitize_key(key: Any) -> str:
    """Lowercase and keep only ``a-z0-9_-``."""
    return _KEY_RE.sub("", str(key or "").lower())


def untrailingslashit(value: str) -> str:
    return value.rstrip("/\\")


def trailingslashit(value: str) -> str:
    return untrailingslashit(value) + "/"


def specialchars_decode(value: str) -> str:
    return _SPECIAL_CHARS_RE.sub(lambda m: _SPECIAL_CHARS[m.group(1)], value)


def parse_query(query: Optional[str]) -> Dict[str, QueryValue]:
    """
    Parse a query string into an ordered mapping.

    HTML-escaped separators (``&amp;``) are decoded first. A repeated key
    keeps its last value, except ``name[]`` keys which collect every value
    in a list. Anything that cannot be parsed gives an empty mapping.
    """
    if not query:
        return {}
    try:
        pairs = parse_qsl(specialchars_decode(query), keep_blank_values=True)
    except ValueError:
        return {}

    parsed: Dict[str, QueryValue] = {}
    for key, value in pairs:
        if key.endswith("[]"):
            parsed.setdefault(key, []).append(value)
        else:
            parsed[key] = value
    return parsed


def url_basename(url: str) -> str:
    """Final path segment of a URL, or "" when it has no path."""
    path = urlsplit(url).path
    if not path:
        return ""
    return posixpath.basename(path.strip("/"))


def home_relative_path(path: str, home_url: str) -> str:
    """`path` with the home URL's own path prefix removed."""
    home_path = urlsplit(home_url).path.strip("/")
    path = path.lstrip("/")
    if home_path and (path == home_path or path.startswith(home_path + "/")):
        path = path[len(home_path):]
    return "/" + path.lstrip("/")


def add_query_arg(args: Mapping[str, Any], url: str) -> str:
    scheme, netloc, path, query, fragment = urlsplit(url)
    merged = parse_query(query)
    for key, value in args.items():
        if value is None or value is False:
            merged.pop(key, None)
        elif isinstance(value, (list, tuple)):
            merged[key] = [str(v) for v in value]
        else:
            merged[key] = str(value)
    return urlunsplit((scheme, netloc, path, urlencode(merged, doseq=True, quote_via=quote_plus), fragment))


def get_query_arg(key: str, url: str) -> Optional[QueryValue]:
    return parse_query(urlsplit(url).query).get(key)
