"""Shared test fixtures and a fake reviewer peripheral."""

import pytest

from studybuddy.app import App
from studybuddy.config import SyncConfig
from studybuddy.db import init_db
from studybuddy.errors import TransportUnavailable
from studybuddy.store import CardStore
from studybuddy.transport import Transport

SERVICE_UUID = "4fafc201-1fb5-459e-8fcc-c5c9c331914b"
CHARACTERISTIC_UUID = "beb5483e-36e1-4688-b7f5-ea07361b26a8"


class FakeTransport(Transport):
    """In-memory transport recording every successful write.

    fail_at: index of the write attempt that raises.
    disconnect_at: fire the disconnect callback once this many writes succeeded.
    """

    def __init__(self, device="reviewer", services=None, unavailable=False,
                 connect_error=None, fail_at=None, disconnect_at=None, on_write=None):
        self.device = device
        self.services = services if services is not None else {SERVICE_UUID: {CHARACTERISTIC_UUID}}
        self.unavailable = unavailable
        self.connect_error = connect_error
        self.fail_at = fail_at
        self.disconnect_at = disconnect_at
        self.on_write = on_write
        self.on_disconnect = None
        self.writes: list[bytes] = []
        self.attempts = 0
        self.closed = 0
        self.discovered_with = None

    async def discover(self, name, timeout):
        self.discovered_with = (name, timeout)
        if self.unavailable:
            raise TransportUnavailable("Bluetooth is not available: no adapter")
        return self.device

    async def connect(self, device, on_disconnect):
        if self.connect_error:
            raise self.connect_error
        self.on_disconnect = on_disconnect

    async def get_service(self, uuid):
        return ("service", uuid) if uuid in self.services else None

    async def get_characteristic(self, service, uuid):
        return ("char", uuid) if uuid in self.services[service[1]] else None

    async def write(self, characteristic, data):
        attempt = self.attempts
        self.attempts += 1
        if attempt == self.fail_at:
            raise OSError("GATT write failed")
        self.writes.append(data)
        if self.on_write:
            self.on_write(len(self.writes))
        if self.disconnect_at is not None and len(self.writes) == self.disconnect_at:
            self.on_disconnect()

    async def close(self):
        self.closed += 1


def replay(writes):
    """Rebuild the peripheral's deck from the raw writes it received."""
    deck = []
    for raw in writes:
        fields = raw.decode("utf-8").split("|")
        if fields[0] == "CLEAR":
            deck = []
        elif fields[0] == "ADD":
            _, cat, question, answer = fields
            deck.append((int(cat), question, answer))
        else:
            raise AssertionError(f"unknown command {raw!r}")
    return deck


class SleepRecorder:
    def __init__(self):
        self.calls: list[float] = []

    async def __call__(self, seconds):
        self.calls.append(seconds)


@pytest.fixture
def db_conn():
    """In-memory SQLite database with schema applied."""
    conn = init_db(":memory:")
    yield conn
    conn.close()


@pytest.fixture
def store(db_conn):
    return CardStore(db_conn)


@pytest.fixture
def config():
    return SyncConfig.from_settings({})


@pytest.fixture
def sleeper():
    return SleepRecorder()


@pytest.fixture
def app(tmp_path):
    """App with tmp data dir, in-memory DB, and a fresh FakeTransport per session."""
    transports = []

    def factory(config):
        transports.append(FakeTransport())
        return transports[-1]

    a = App(data_dir=tmp_path, transport_factory=factory)
    a.init_db(":memory:")
    a.transports = transports
    yield a
    a.close()
