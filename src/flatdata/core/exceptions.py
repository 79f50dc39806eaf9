"""
Exceptions raised by the flat data engine.

Every error is raised synchronously to the immediate caller; nothing is
retried internally.
"""

from typing import Any, Optional


class FlatDataError(Exception):
    """Base exception for all flat data errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class RepositoryPathNotFound(FlatDataError):
    """Raised when the configured repositories directory does not exist."""

    def __init__(self, path: Any):
        super().__init__(
            message=f"Path not found: {path}", details={"path": str(path)}
        )


class RepositoryNotFound(FlatDataError):
    """Raised when a repository's backing file is absent."""

    def __init__(self, repository: str, path: Any = None):
        message = f'Repository "{repository}" cannot be found'
        if path is not None:
            message += f" at {path}"
        super().__init__(
            message=message,
            details={"repository": repository, "path": str(path) if path else None},
        )


class InvalidRepositoryFormat(FlatDataError):
    """Raised when a repository file does not hold a mapping of records."""

    def __init__(self, repository: str, found_type: str):
        super().__init__(
            message=(
                f'Repository "{repository}" must be a mapping of records, '
                f"got {found_type}"
            ),
            details={"repository": repository, "found_type": found_type},
        )


class RecordNotFound(FlatDataError):
    """Raised when a record id is absent from the current record set."""

    def __init__(self, record_id: Any, repository: Optional[str]):
        super().__init__(
            message=(
                f'Cannot find "{record_id}" in the following repository: '
                f'"{repository}"'
            ),
            details={"record_id": record_id, "repository": repository},
        )


class PropertyNotFound(FlatDataError):
    """Raised when a property lookup misses."""

    def __init__(self, prop: Any, record_id: Any):
        super().__init__(
            message=f'Property named "{prop}" was not found in record named "{record_id}"',
            details={"property": prop, "record_id": record_id},
        )


class MalformedRelationDeclaration(FlatDataError):
    """Raised when a relation declaration is missing required keys."""

    def __init__(self, reason: str, declaration: Any = None):
        super().__init__(
            message=f"Malformed relation declaration: {reason}",
            details={"reason": reason, "declaration": declaration},
        )


class UnsupportedOperator(FlatDataError):
    """Raised when a filter uses an unknown comparison operator."""

    def __init__(self, operator: Any):
        super().__init__(
            message=f'Operator "{operator}" does not exist',
            details={"operator": operator},
        )


class InvalidStateTransition(FlatDataError):
    """Raised when a cursor operation is called from the wrong state."""

    def __init__(self, operation: str, state: Any, reason: Optional[str] = None):
        message = f"Cannot call {operation}() from state {state}"
        if reason:
            message += f": {reason}"
        super().__init__(
            message=message,
            details={"operation": operation, "state": str(state), "reason": reason},
        )


class AlreadyScopedToRecord(InvalidStateTransition):
    """Raised when filtering a repository from which a record is already fetched."""

    def __init__(self, state: Any):
        super().__init__(
            "filter",
            state,
            reason="cannot filter a repository from which a record is already fetched",
        )


class CacheDirectoryNotFound(FlatDataError):
    """Raised when a file cache is pointed at a missing directory."""

    def __init__(self, path: Any):
        super().__init__(
            message=f'The directory "{path}" cannot be found',
            details={"path": str(path)},
        )


class RepositoryParseError(FlatDataError):
    """Raised when a repository file cannot be parsed."""

    def __init__(self, path: Any, reason: str):
        super().__init__(
            message=f'Cannot parse repository file "{path}": {reason}',
            details={"path": str(path), "reason": reason},
        )
