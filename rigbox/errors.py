"""Error taxonomy shared by the driver, provisioners and CLI."""


class RigboxError(Exception):
    """Base class for errors surfaced to rigbox callers."""


class ClientError(RigboxError):
    """Invalid usage or configuration: unimplemented phases, unknown plugins, bad config files."""


class ActionFailed(RigboxError):
    """A remote action failed. Wraps every transport-level failure."""


class TransportError(Exception):
    """Raised by transports. Translated into ActionFailed before reaching callers."""


class SSHFailed(TransportError):
    """An SSH session, command or upload did not succeed."""
