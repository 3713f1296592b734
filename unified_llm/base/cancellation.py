"""Cooperative cancellation primitives (public API facade).

``CancellationToken`` lets a caller stop a stream from outside the consuming
loop; ``CancelledError`` is what the stream observes internally. Task
cancellation (``asyncio.CancelledError``) is handled separately by the event
loop and always propagates.
"""

from .cancellation_parts.cancelled_error import CancelledError
from .cancellation_parts.cancellation_token import CancellationToken

__all__ = ["CancellationToken", "CancelledError"]
