"""Identity token decoders.

Real camera decoding is out of scope; these decoders stand in for it.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Any, Optional


class TokenDecoder(ABC):
    """Extracts an identity token from a captured frame."""

    @abstractmethod
    async def decode(self, frame: Any) -> Optional[str]:
        """Return the decoded token, or None when nothing could be read."""
        pass


class PayloadDecoder(TokenDecoder):
    """Treats the frame as the already-decoded text payload."""

    async def decode(self, frame: Any) -> Optional[str]:
        if isinstance(frame, bytes):
            frame = frame.decode("utf-8", errors="replace")
        if not isinstance(frame, str):
            return None
        token = frame.strip()
        return token or None


class FixedTokenDecoder(TokenDecoder):
    """Demonstration decoder: every capture resolves to one pre-selected token.

    ``delay_seconds`` simulates the time a camera capture would take.
    """

    def __init__(self, token: str, delay_seconds: float = 0.0):
        self.token = token
        self.delay_seconds = delay_seconds

    async def decode(self, frame: Any) -> Optional[str]:
        if self.delay_seconds > 0:
            await asyncio.sleep(self.delay_seconds)
        return self.token
