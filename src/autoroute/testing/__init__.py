"""Test utilities for autoroute applications::

    from autoroute.testing import TestClient
"""

from autoroute.testing.client import TestClient, TestResponse, encode_multipart

__all__ = ["TestClient", "TestResponse", "encode_multipart"]
