"""HTTP transport adapters.

Implements the HttpTransport protocol with httpx.
"""

from multibase.adapters.transport.fake import FakeTransport
from multibase.adapters.transport.httpx_transport import HttpxTransport

__all__ = ["FakeTransport", "HttpxTransport"]
