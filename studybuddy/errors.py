"""Error kinds raised while syncing the deck to the reviewer."""


class SyncError(Exception):
    """Base class; the message is shown to the user as the failure reason."""


class TransportUnavailable(SyncError):
    pass


class DeviceNotFound(SyncError):
    pass


class ProtocolMismatch(SyncError):
    pass


class WriteFailure(SyncError):
    def __init__(self, position: int, sent: int, total: int, cause: Exception):
        self.position = position
        self.sent = sent
        self.total = total
        self.cause = cause
        super().__init__(
            f"write of command {position + 1} of {total} failed: {str(cause) or cause.__class__.__name__}. "
            f"{sent} command(s) were already written, so the device may hold a partial deck")


class LinkLost(SyncError):
    pass


class SessionBusy(RuntimeError):
    """A sync was requested while another session is still active."""
