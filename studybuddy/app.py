"""App: central object that wires together data dir, db, card store, and sync."""

import pathlib
import sqlite3
from typing import Callable

from studybuddy.config import SyncConfig, get_data_dir, load_settings
from studybuddy.db import init_db
from studybuddy.errors import SessionBusy
from studybuddy.models import SyncResult
from studybuddy.session import SyncSession
from studybuddy.store import CardStore
from studybuddy.transport import Transport


def _default_transport(config: SyncConfig) -> Transport:
    from studybuddy.ble import BleakTransport
    return BleakTransport(write_with_response=config.write_with_response)


class App:
    """Holds all shared state for a studybuddy process.

    Usage:
        app = App(data_dir="/path/to/data")
        app.init_db()                    # uses data_dir/studybuddy.db
        app.store.add_card(0, "Q", "A")
        result = asyncio.run(app.sync(print))
        app.close()

    For testing:
        app = App(data_dir=tmp_path, transport_factory=lambda config: FakeTransport())
        app.init_db(":memory:")

    At most one sync session is active at a time; the session itself
    assumes it is the only writer to the peripheral.
    """

    def __init__(self, data_dir: pathlib.Path | str | None = None,
                 transport_factory: Callable[[SyncConfig], Transport] | None = None):
        if data_dir is None:
            data_dir = get_data_dir()
        self.data_dir = pathlib.Path(data_dir)
        self.settings = load_settings(self.data_dir)
        self.conn: sqlite3.Connection | None = None
        self.store: CardStore | None = None
        self._transport_factory = transport_factory or _default_transport
        self.active_session: SyncSession | None = None

    def init_db(self, db_path: pathlib.Path | str | None = None) -> sqlite3.Connection:
        """Initialize (or connect to) the database and load the card store.

        Args:
            db_path: Path to the SQLite database file, or ":memory:" for
                     in-memory databases (useful for testing). Defaults to
                     data_dir/studybuddy.db.
        """
        if db_path is None:
            db_path = self.data_dir / "studybuddy.db"
        self.conn = init_db(db_path)
        self.store = CardStore(self.conn)
        return self.conn

    def sync_config(self) -> SyncConfig:
        return SyncConfig.from_settings(self.settings)

    def new_session(self, publish: Callable[[str], None] | None = None,
                    sleep=None) -> SyncSession:
        """Create the next sync session, refusing while another is still running."""
        if self.active_session is not None and not self.active_session.is_terminal:
            raise SessionBusy("A sync is already in progress")
        config = self.sync_config()
        self.active_session = SyncSession(self.store, self._transport_factory(config), config,
                                          publish=publish, sleep=sleep)
        return self.active_session

    async def sync(self, publish: Callable[[str], None] | None = None, sleep=None) -> SyncResult:
        session = self.new_session(publish, sleep)
        return await session.run()

    def close(self):
        """Close the database connection."""
        if self.conn:
            self.conn.close()
            self.conn = None
            self.store = None
