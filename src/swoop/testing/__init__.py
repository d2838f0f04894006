"""Test utilities for swoop applications::

    from swoop.testing import TestClient
"""

from swoop.testing.client import TestClient, TestResponse

__all__ = [
    "TestClient",
    "TestResponse",
]
