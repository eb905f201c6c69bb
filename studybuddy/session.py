"""SyncSession: mirrors the local deck onto the reviewer peripheral.

One session is one attempt. It walks

    IDLE -> DISCOVERING -> CONNECTING -> RESOLVING_SERVICE
         -> RESOLVING_CHARACTERISTIC -> TRANSMITTING -> COMPLETED

and ends in FAILED, DISCONNECTED (link lost) or CANCELLED otherwise.
Sessions are never resumed or retried; retrying means a new session.

Transmission writes CLEAR, then one ADD per card in store order, one write
at a time with a pause after each. There is no acknowledgement from the
peripheral beyond the local write confirmation, and a failed write leaves
whatever was already written on the device.
"""

import asyncio
import sys
from typing import Any, Callable

from studybuddy.config import SyncConfig
from studybuddy.encoder import encode_deck
from studybuddy.errors import DeviceNotFound, LinkLost, ProtocolMismatch, SyncError, WriteFailure
from studybuddy.models import TERMINAL_PHASES, Phase, SyncResult
from studybuddy.store import CardStore
from studybuddy.transport import Transport


class SyncSession:
    def __init__(self, store: CardStore, transport: Transport, config: SyncConfig,
                 publish: Callable[[str], None] | None = None,
                 sleep: Callable[[float], Any] | None = None):
        self.store = store
        self.transport = transport
        self.config = config
        self._publish = publish or (lambda status: None)
        self._sleep = sleep or asyncio.sleep
        self.phase = Phase.IDLE
        self.pending_count = 0
        self.sent_count = 0
        self.last_error: SyncError | None = None
        self._device = None
        self._service = None
        self._characteristic = None
        self._opened = False
        self._connected = False

    @property
    def is_terminal(self) -> bool:
        return self.phase in TERMINAL_PHASES

    @property
    def holds_device(self) -> bool:
        return self._connected

    def result(self) -> SyncResult:
        return SyncResult(phase=self.phase, sent_count=self.sent_count,
                          pending_count=self.pending_count,
                          error=str(self.last_error) if self.last_error else None)

    async def run(self) -> SyncResult:
        if self.phase is not Phase.IDLE:
            raise RuntimeError("SyncSession is single-use; start a new session to retry")
        steps = (self._discover, self._connect, self._resolve_service,
                 self._resolve_characteristic, self._transmit)
        try:
            for step in steps:
                if self.is_terminal:
                    break
                await step()
        except SyncError as e:
            self._fail(e)
        except asyncio.CancelledError:
            self.cancel()
            raise
        except Exception as e:
            # Connect/transport errors with no dedicated kind keep their own text.
            self._fail(SyncError(str(e) or e.__class__.__name__))
        finally:
            await self._release()
        return self.result()

    def cancel(self):
        """Stop after the write in flight. Commands already sent stay on the device."""
        if self.is_terminal:
            return
        self._enter(Phase.CANCELLED, "Sync cancelled")

    def _enter(self, phase: Phase, status: str):
        self.phase = phase
        self._publish(status)

    def _fail(self, error: SyncError):
        if self.is_terminal:
            return
        self.last_error = error
        self._enter(Phase.FAILED, f"Sync failed: {error}")

    def _on_disconnect(self):
        if not self._connected:
            return
        self._connected = False
        self._drop_handles()
        if self.phase in (Phase.FAILED, Phase.CANCELLED, Phase.DISCONNECTED):
            return
        self.last_error = LinkLost(f"Connection to {self.config.device_name} lost")
        self._enter(Phase.DISCONNECTED, "Connection lost")

    async def _discover(self):
        self._enter(Phase.DISCOVERING, f"Searching for {self.config.device_name}...")
        device = await self.transport.discover(self.config.device_name, self.config.scan_timeout)
        if device is None:
            raise DeviceNotFound(f"No device named {self.config.device_name!r} was found")
        self._device = device

    async def _connect(self):
        self._enter(Phase.CONNECTING, f"Connecting to {self.config.device_name}...")
        self._opened = True
        await self.transport.connect(self._device, self._on_disconnect)
        self._connected = True

    async def _resolve_service(self):
        self._enter(Phase.RESOLVING_SERVICE, "Looking up card service...")
        service = await self.transport.get_service(self.config.service_uuid)
        if service is None:
            raise ProtocolMismatch(
                f"Service {self.config.service_uuid} not found; is this a StudyBuddy reviewer?")
        self._service = service

    async def _resolve_characteristic(self):
        self._enter(Phase.RESOLVING_CHARACTERISTIC, "Looking up card characteristic...")
        characteristic = await self.transport.get_characteristic(
            self._service, self.config.characteristic_uuid)
        if characteristic is None:
            raise ProtocolMismatch(
                f"Characteristic {self.config.characteristic_uuid} not found in service "
                f"{self.config.service_uuid}")
        self._characteristic = characteristic

    async def _transmit(self):
        cards = self.store.list_cards()
        total = len(cards) + 1
        self.pending_count = total
        self._enter(Phase.TRANSMITTING, f"Syncing {len(cards)} card(s)...")
        for position, command in enumerate(encode_deck(cards, self.config.include_category)):
            if self.phase is not Phase.TRANSMITTING:
                return
            try:
                await self.transport.write(self._characteristic, command.encode("utf-8"))
            except Exception as e:
                if self.phase is not Phase.TRANSMITTING:
                    return
                raise WriteFailure(position, self.sent_count, total, e) from e
            self.sent_count += 1
            self.pending_count -= 1
            await self._sleep(self._spacing_after(position) / 1000)
        if self.phase is Phase.TRANSMITTING:
            self._enter(Phase.COMPLETED, f"Sync complete: {len(cards)} card(s) sent")

    def _spacing_after(self, position: int) -> int:
        if position == 0:
            return self.config.reset_spacing_ms
        return self.config.command_spacing_ms

    def _drop_handles(self):
        self._device = None
        self._service = None
        self._characteristic = None

    async def _release(self):
        self._connected = False
        self._drop_handles()
        if not self._opened:
            return
        self._opened = False
        try:
            await self.transport.close()
        except Exception as e:
            print(f"Warning: closing connection failed: {e}", file=sys.stderr)
