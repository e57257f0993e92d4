"""
Asset path canonicalisation.

Platform builds reference the same stored asset in several shapes:

    /web/<anything>/https://cdn.example/1a2b3c4dlogo.png
    /assets/<folder>/nested/1a2b3c4dlogo.png
    /assets/1a2b3c4dlogo.png

All of them resolve to the single stored filename ``logo.png``. Everything
here is pure string work; nothing touches the file system.
"""
from __future__ import annotations

import string

from core_config.constants import ASSET_HASH_PREFIX_LEN

_EMBEDDED_URL_MARKER = "http"
_LOWER_HEX = frozenset(string.digits + "abcdef")
_FORBIDDEN_CHARS = ("/", "\\", "\x00")


class UnsafeAssetPath(ValueError):
    """The canonical name would escape the asset root or is empty."""

    def __init__(self, raw: str, reason: str) -> None:
        super().__init__(f"unsafe asset path {raw!r}: {reason}")
        self.raw = raw
        self.reason = reason


def recover_embedded_url(raw_path: str) -> str:
    """Drop everything before the first ``http`` (case-sensitive), if any."""
    idx = raw_path.find(_EMBEDDED_URL_MARKER)
    return raw_path[idx:] if idx >= 0 else raw_path


def basename(path: str) -> str:
    """Text after the last ``/``."""
    return path.rsplit("/", 1)[-1]


def has_hash_prefix(name: str) -> bool:
    prefix = name[:ASSET_HASH_PREFIX_LEN]
    return (
        len(name) > ASSET_HASH_PREFIX_LEN
        and len(prefix) == ASSET_HASH_PREFIX_LEN
        and all(ch in _LOWER_HEX for ch in prefix)
    )


def strip_hash_prefix(name: str) -> str:
    """
    Remove a leading 8-char lowercase-hex hash glued to the filename.

    A name made of the 8 hex chars alone is left as is: there is no filename
    behind the prefix to recover.
    """
    if has_hash_prefix(name):
        return name[ASSET_HASH_PREFIX_LEN:]
    return name


def ensure_safe(name: str, *, raw: str | None = None) -> str:
    """Fail closed on anything that is not a plain single-segment filename."""
    source = name if raw is None else raw
    if not name or name == ".":
        raise UnsafeAssetPath(source, "empty filename")
    for ch in _FORBIDDEN_CHARS:
        if ch in name:
            raise UnsafeAssetPath(source, f"contains {ch!r}")
    if ".." in name:
        raise UnsafeAssetPath(source, "contains '..'")
    return name


def canonicalize(raw_path: str) -> str:
    """
    Full canonicalisation for redirect sources (``/web/*``, ``/assets/:folder/*``):
    embedded URL recovery, basename, hash strip, safety check.
    """
    name = strip_hash_prefix(basename(recover_embedded_url(raw_path)))
    return ensure_safe(name, raw=raw_path)


def canonicalize_terminal(filename: str) -> str:
    """
    Canonicalisation for ``/assets/:filename``: no URL or folder is expected
    here, so only the hash strip and the safety check apply.
    """
    return ensure_safe(strip_hash_prefix(filename), raw=filename)


__all__ = [
    "UnsafeAssetPath",
    "recover_embedded_url",
    "basename",
    "has_hash_prefix",
    "strip_hash_prefix",
    "ensure_safe",
    "canonicalize",
    "canonicalize_terminal",
]
