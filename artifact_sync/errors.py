from __future__ import annotations


class ArtifactSyncError(Exception):
    """Base class for every failure that aborts a sync run."""


class CredentialMissingError(ArtifactSyncError):
    pass


class ListingError(ArtifactSyncError):
    pass


class FetchError(ArtifactSyncError):
    pass


class DownloadHTTPError(FetchError):
    pass


class FileCreateError(FetchError):
    pass


class FileSystemError(ArtifactSyncError):
    pass


class ExtractionError(ArtifactSyncError):
    pass


class ArchiveOpenError(ExtractionError):
    pass


class PathTraversalError(ExtractionError):
    def __init__(self, entry_name: str, resolved: str) -> None:
        super().__init__(f"{entry_name}: illegal file path (resolves to {resolved})")
        self.entry_name = entry_name
        self.resolved = resolved


class StoreError(ArtifactSyncError):
    pass


class StoreReadError(StoreError):
    pass


class StoreWriteError(StoreError):
    pass
