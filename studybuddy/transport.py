"""Transport contract the sync session drives.

A transport is a single-use channel to one peripheral. All methods are
coroutines; the session never has two of them in flight at once.
"""

from typing import Any, Callable


class Transport:
    async def discover(self, name: str, timeout: float) -> Any | None:
        """Find a peripheral advertising exactly ``name``.

        Returns None when nothing matched (or the user dismissed a picker).
        Raises TransportUnavailable when the platform has no usable radio.
        """
        raise NotImplementedError

    async def connect(self, device: Any, on_disconnect: Callable[[], None]):
        """Connect; ``on_disconnect`` fires once if the link drops later."""
        raise NotImplementedError

    async def get_service(self, uuid: str) -> Any | None:
        raise NotImplementedError

    async def get_characteristic(self, service: Any, uuid: str) -> Any | None:
        raise NotImplementedError

    async def write(self, characteristic: Any, data: bytes):
        """Return once the local stack confirms the write."""
        raise NotImplementedError

    async def close(self):
        raise NotImplementedError
