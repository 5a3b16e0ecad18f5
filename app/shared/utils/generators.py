"""CUID2 identifiers for business rows and audit records."""

from cuid2 import cuid_wrapper

_next_cuid = cuid_wrapper()


def generate_cuid() -> str:
    """Return a new collision-resistant id (CUID2, 24 chars)."""
    return str(_next_cuid())
