"""
Non-throwing helpers for reading absolute URIs.

Issuers and templates come from untrusted tokens and configuration, so every
helper here returns ``None`` or an empty value instead of raising.
"""

import re
from typing import List, Optional
from urllib.parse import SplitResult, unquote, urlsplit

_DEFAULT_PORTS = {"http": 80, "https": 443}

_SEGMENT_RE = re.compile(r"[^/]*/|[^/]+")

# Control characters and spaces. urlsplit silently drops tab, CR and LF
_UNSAFE_RE = re.compile(r"[\x00-\x20\x7f]")


def parse_absolute_uri(value: Optional[str]) -> Optional[SplitResult]:
    """Parse ``value`` as an absolute URI, or return None if it isn't one."""
    if not value or not isinstance(value, str):
        return None
    if _UNSAFE_RE.search(value) or any(ch.isspace() for ch in value):
        return None
    try:
        parts = urlsplit(value)
        # .port validates the port number lazily
        parts.port
    except ValueError:
        return None
    if not parts.scheme or not parts.hostname:
        return None
    return parts


def uri_authority(parts: SplitResult) -> str:
    """Lower-cased host, with the port appended when it isn't the scheme default."""
    host = parts.hostname or ""
    if ":" in host:
        host = f"[{host}]"
    port = parts.port
    if port is not None and port != _DEFAULT_PORTS.get(parts.scheme.lower()):
        return f"{host}:{port}"
    return host


def uri_local_path(parts: SplitResult) -> str:
    # Decoded per segment; an encoded slash stays encoded and never splits the path
    path = parts.path or "/"
    return "/".join(unquote(segment).replace("/", "%2F") for segment in path.split("/"))


def uri_segments(parts: SplitResult) -> List[str]:
    """
    Split the path the way absolute URIs expose it: every segment keeps its
    trailing slash, so ``/tid/v2.0/`` gives ``["/", "tid/", "v2.0/"]``.
    """
    return _SEGMENT_RE.findall(parts.path or "/")
