"""Protocol definitions for the engine's collaborators (PEP 544)."""

from pathlib import Path
from typing import Protocol, runtime_checkable

from flatdata.core.values import Value


@runtime_checkable
class DataLoader(Protocol):
    """
    Protocol for repository file parsers.

    A parser turns one repository file into a raw Value. Swapping the
    parser (YAML, JSON, ...) never changes the engine.
    """

    @property
    def extension(self) -> str:
        """
        File extension of repositories this parser reads, without the dot.

        Example: a YAML parser returns ``"yml"``.
        """
        ...

    def load(self, path: Path) -> Value:
        """
        Parse a repository file.

        Args:
            path: Absolute path of an existing repository file

        Returns:
            Raw nested value held by the file

        Raises:
            RepositoryParseError: If the file is not valid for this format
        """
        ...


@runtime_checkable
class RecordCache(Protocol):
    """
    Protocol for cache backends.

    Backends store opaque bytes by key; serialization is owned by the engine.
    """

    def get(self, key: str) -> bytes | None:
        """Return stored bytes for ``key`` or None on a miss."""
        ...

    def set(self, key: str, data: bytes) -> None:
        """Store ``data`` under ``key``."""
        ...
