from __future__ import annotations


class InstallerError(RuntimeError):
    """Base class for every fatal installer failure."""


class ConfigError(InstallerError):
    pass


class ValidationError(InstallerError):
    """A literal version did not match the semantic-version pattern."""


class ResolutionError(InstallerError):
    """The version metadata endpoint was unreachable or had no usable version."""


class DownloadError(InstallerError):
    pass


class ChecksumMissingError(InstallerError):
    """The archive filename is not listed in the checksum manifest."""


class ChecksumMismatchError(InstallerError):
    def __init__(self, filename: str, expected: str, actual: str) -> None:
        super().__init__(f"Checksum mismatch for {filename}: expected {expected}, got {actual}")
        self.filename = filename
        self.expected = expected
        self.actual = actual


class PlacementError(InstallerError):
    pass
