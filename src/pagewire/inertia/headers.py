"""Page protocol header names.

Bit-exact names the SPA client sends and expects. Compared
case-insensitively on the way in (``Headers`` lowercases), emitted
with this casing on the way out.
"""

INERTIA = "X-Inertia"
"""Request marker (presence) and response marker (value ``true``)."""

VERSION = "X-Inertia-Version"
"""Asset version the client was built against."""

PARTIAL_DATA = "X-Inertia-Partial-Data"
"""Comma-separated prop names to include in a partial reload."""

PARTIAL_EXCEPT = "X-Inertia-Partial-Except"
"""Comma-separated prop names to leave out of a partial reload."""

PARTIAL_COMPONENT = "X-Inertia-Partial-Component"
"""Component the client believes it is reloading."""

ERROR_BAG = "X-Inertia-Error-Bag"
"""Name of the validation error bag the client is interested in."""

RESET = "X-Inertia-Reset"
"""Comma-separated merge props the client wants replaced, not merged."""

EXCEPT_ONCE_PROPS = "X-Inertia-Except-Once-Props"
"""Comma-separated once-prop keys the client already holds."""

LOCATION = "X-Inertia-Location"
"""Location override: tells the client to do a full browser visit."""
