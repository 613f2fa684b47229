"""Exception hierarchy for c3ffi.

Each module raises its own exception class; all of them derive from
C3FFIError so build scripts can catch every failure in one place.
"""


class C3FFIError(Exception):
    """Base exception for all c3ffi failures."""
    pass
