"""BLE transport for the reviewer peripheral, built on bleak."""

from typing import Any, Callable

from bleak import BleakClient, BleakScanner
from bleak.exc import BleakError

from studybuddy.errors import TransportUnavailable
from studybuddy.transport import Transport


class BleakTransport(Transport):
    def __init__(self, write_with_response: bool = True):
        self.write_with_response = write_with_response
        self._client: BleakClient | None = None

    async def discover(self, name: str, timeout: float) -> Any | None:
        def matches(device, advertisement) -> bool:
            return (advertisement.local_name or device.name) == name

        try:
            return await BleakScanner.find_device_by_filter(matches, timeout=timeout)
        except (BleakError, OSError) as e:
            raise TransportUnavailable(f"Bluetooth is not available: {e}") from e

    async def connect(self, device: Any, on_disconnect: Callable[[], None]):
        self._client = BleakClient(device, disconnected_callback=lambda _client: on_disconnect())
        await self._client.connect()

    async def get_service(self, uuid: str) -> Any | None:
        return self._require_client().services.get_service(uuid)

    async def get_characteristic(self, service: Any, uuid: str) -> Any | None:
        return service.get_characteristic(uuid)

    async def write(self, characteristic: Any, data: bytes):
        await self._require_client().write_gatt_char(
            characteristic, data, response=self.write_with_response)

    async def close(self):
        client, self._client = self._client, None
        if client is not None and client.is_connected:
            await client.disconnect()

    def _require_client(self) -> BleakClient:
        if self._client is None:
            raise BleakError("Not connected")
        return self._client
