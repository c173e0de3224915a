"""Test utilities for pagewire applications::

    from pagewire.testing import TestClient, assert_inertia_page
"""

from pagewire.testing.assertions import (
    assert_inertia_page,
    assert_location,
    assert_props,
    assert_redirect,
    page_of,
)
from pagewire.testing.client import TestClient

__all__ = [
    "TestClient",
    "assert_inertia_page",
    "assert_location",
    "assert_props",
    "assert_redirect",
    "page_of",
]
