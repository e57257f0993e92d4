import re, uuid

_REQUEST_ID_OK = re.compile(r"^[A-Za-z0-9._-]{1,64}$")

def generate_request_id() -> str:
    """
    Non-deterministic 16-hex id for logging and response correlation.
    """
    return uuid.uuid4().hex[:16]

def accept_request_id(provided: str | None) -> str:
    """
    Reuse a caller-supplied ``x-request-id`` when it is short and printable,
    otherwise mint a fresh one so log lines never carry arbitrary header bytes.
    """
    if provided and _REQUEST_ID_OK.match(provided):
        return provided
    return generate_request_id()
