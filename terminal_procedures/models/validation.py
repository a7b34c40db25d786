"""
Validation and error types for procedure definitions.

This module provides the exception hierarchy raised by the procedure models,
validation results for structural checks on raw procedure data, and the
result object returned by waypoint lookups.
"""

from dataclasses import dataclass, field
from typing import List, Any, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .procedure_waypoint import ProcedureWaypoint


class ProcedureError(Exception):
    """Base class for all procedure model errors."""


class ProcedureConstructionError(ProcedureError, TypeError):
    """Raised when a procedure cannot be built from the supplied data."""


class MalformedProcedureDataError(ProcedureError, TypeError):
    """Raised when stored procedure data does not have the expected shape."""

    def __init__(self, message: str, icao: Optional[str] = None):
        super().__init__(message)
        self.icao = icao


class ProcedureLookupError(ProcedureError, LookupError):
    """Raised when an entry, exit or procedure is not known."""

    def __init__(self, message: str, icao: Optional[str] = None, key: Any = None, kind: Optional[str] = None):
        """
        Initialize lookup error.

        Args:
            message: Error message
            icao: Identifier of the procedure the lookup was made against
            key: The entry/exit/procedure name that was requested
            kind: What was looked up ('entry', 'exit', 'procedure')
        """
        super().__init__(message)
        self.icao = icao
        self.key = key
        self.kind = kind

    def __str__(self) -> str:
        # LookupError would otherwise repr() the message
        return self.args[0] if self.args else ''


@dataclass
class ValidationError:
    """Represents a single validation error."""

    field: str
    message: str
    value: Any = None

    def __str__(self) -> str:
        if self.value is not None:
            return f"{self.field}: {self.message} (value: {self.value})"
        return f"{self.field}: {self.message}"


@dataclass
class ValidationResult:
    """Result of a validation operation."""

    errors: List[ValidationError] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        """Check if validation passed (no errors)."""
        return len(self.errors) == 0

    def add_error(self, field: str, message: str, value: Any = None) -> None:
        self.errors.append(ValidationError(field, message, value))

    def add_warning(self, message: str) -> None:
        self.warnings.append(message)

    def merge(self, other: 'ValidationResult', prefix: Optional[str] = None) -> 'ValidationResult':
        """
        Add the errors and warnings of another result to this one.

        Args:
            other: Result to merge in
            prefix: Optional prefix for the merged field names and warnings

        Returns:
            self, for chaining
        """
        for error in other.errors:
            name = f"{prefix}.{error.field}" if prefix else error.field
            self.errors.append(ValidationError(name, error.message, error.value))
        for warning in other.warnings:
            self.warnings.append(f"{prefix}: {warning}" if prefix else warning)
        return self

    def __str__(self) -> str:
        if self.is_valid:
            if self.warnings:
                return f"Valid (with {len(self.warnings)} warnings)"
            return "Valid"
        return f"Invalid ({len(self.errors)} errors)"

    def get_error_messages(self) -> List[str]:
        """Get all error messages as strings."""
        return [str(error) for error in self.errors]


@dataclass
class WaypointRouteResult:
    """
    Outcome of resolving the waypoints for an entry/exit pair.

    Either `waypoints` holds the full sequence, or `errors` explains why no
    sequence could be produced. Callers decide whether a failure is fatal;
    `unwrap()` turns it into a ProcedureLookupError.
    """

    icao: str
    entry: Optional[str] = None
    exit: Optional[str] = None
    waypoints: List['ProcedureWaypoint'] = field(default_factory=list)
    errors: List[ValidationError] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    def unwrap(self) -> List['ProcedureWaypoint']:
        """
        Return the waypoints or raise if the lookup failed.

        Raises:
            ProcedureLookupError: with the first recorded error
        """
        if self.errors:
            first = self.errors[0]
            raise ProcedureLookupError(first.message, icao=self.icao, key=first.value, kind=first.field)
        return self.waypoints

    @classmethod
    def failure(cls, icao: str, kind: str, message: str, key: Any,
                entry: Optional[str] = None, exit: Optional[str] = None) -> 'WaypointRouteResult':
        """Create a failed result with a single error."""
        return cls(icao=icao, entry=entry, exit=exit, errors=[ValidationError(kind, message, key)])

    def __len__(self) -> int:
        return len(self.waypoints)

    def __bool__(self) -> bool:
        return self.is_valid
