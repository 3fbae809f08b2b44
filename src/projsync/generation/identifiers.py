"""Stable project identifiers derived from module names."""

from __future__ import annotations

import hashlib
import uuid


def derive_id(name: str) -> str:
    """Return the project GUID for *name*, uppercase, without braces.

    The MD5 digest of the UTF-8 name is read the way .NET's ``Guid(byte[])``
    reads raw bytes (first three fields little-endian), so identifiers match
    those produced by the host tooling for the same module.
    """
    digest = hashlib.md5(name.encode("utf-8")).digest()  # noqa: S324 - not used for security
    return str(uuid.UUID(bytes_le=digest)).upper()


def braced(identifier: str) -> str:
    return f"{{{identifier}}}"
