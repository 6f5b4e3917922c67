"""Exceptions raised while loading project snapshots."""


class SnapshotParseError(ValueError):
    """A snapshot file or record could not be turned into engine input."""
