"""Exception hierarchy for tubemirror.

Remote and storage failures are raised as one of these types so callers
can tell a fatal pass failure from a playlist that can be skipped.
"""
# Created: 2026-10-18


class TubeMirrorError(Exception):
    """Base class for all tubemirror errors."""
    pass


class ConfigurationError(TubeMirrorError):
    """Raised when required configuration is missing or invalid."""
    pass


class SelectorConflict(ConfigurationError):
    """Raised when neither or both of username and channel id are set."""
    pass


class RemoteUnavailable(TubeMirrorError):
    """Raised on transport failures, non-2xx responses or malformed bodies."""
    pass


class EmptyResult(TubeMirrorError):
    """Raised when the remote reports no matching account or playlists."""
    pass


class PersistenceError(TubeMirrorError):
    """Raised when the video store fails to read or write."""
    pass
