"""Test utilities for wren applications.

::

    from wren.testing import TestClient, make_request, assert_is_fragment
"""

from wren.testing.assertions import (
    assert_behavior_script,
    assert_fragment_contains,
    assert_fragment_not_contains,
    assert_is_error_fragment,
    assert_is_fragment,
    assert_is_page,
    hx_headers,
)
from wren.testing.client import TestClient
from wren.testing.requests import make_request

__all__ = [
    "TestClient",
    "assert_behavior_script",
    "assert_fragment_contains",
    "assert_fragment_not_contains",
    "assert_is_error_fragment",
    "assert_is_fragment",
    "assert_is_page",
    "hx_headers",
    "make_request",
]
