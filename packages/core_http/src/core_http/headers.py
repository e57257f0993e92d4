"""
Canonical HTTP header names and upstream header sets used by the gateway.
"""
from typing import Final, Dict, Mapping

CONTENT_TYPE: Final[str] = "content-type"

# The TV client's own identity; the upstream platform serves TV-shaped
# payloads only to this user agent.
TV_USER_AGENT: Final[str] = (
    "Mozilla/5.0 (ChromiumStylePlatform) Cobalt/Version"
)

# Inbound headers worth relaying upstream (lower-cased).
FORWARDABLE_CLIENT_HEADERS = (
    "accept-language",
)

def upstream_headers(inbound: Mapping[str, str] | None = None, *, json_body: bool = False) -> Dict[str, str]:
    """
    Build the header set for an upstream call: fixed TV identity plus the
    whitelisted client headers. Empty values are dropped.
    """
    out: Dict[str, str] = {"user-agent": TV_USER_AGENT}
    if json_body:
        out[CONTENT_TYPE] = "application/json"
    if inbound:
        src = {str(k).lower(): v for k, v in inbound.items()}
        for name in FORWARDABLE_CLIENT_HEADERS:
            v = src.get(name)
            if isinstance(v, str) and v.strip():
                out[name] = v.strip()
    return out

__all__ = [
    "CONTENT_TYPE",
    "TV_USER_AGENT",
    "FORWARDABLE_CLIENT_HEADERS",
    "upstream_headers",
]
