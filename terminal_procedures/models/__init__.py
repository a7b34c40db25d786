"""
Data models for the terminal_procedures library.

This package contains the procedure definition model, its fix token
parser and waypoint type, the error and validation types, and the
queryable procedure catalog.
"""

from .procedure_type import ProcedureType
from .fix_token import FixToken, parse_fix_descriptor, parse_draw_token
from .procedure_waypoint import ProcedureWaypoint
from .procedure_definition import ProcedureDefinition
from .queryable_collection import QueryableCollection
from .procedure_collection import ProcedureCollection
from .validation import (
    ProcedureError,
    ProcedureConstructionError,
    MalformedProcedureDataError,
    ProcedureLookupError,
    ValidationError,
    ValidationResult,
    WaypointRouteResult,
)

__all__ = [
    # Core models
    'ProcedureType',
    'ProcedureDefinition',
    'ProcedureWaypoint',
    'FixToken',
    'parse_fix_descriptor',
    'parse_draw_token',
    # Queryable collections
    'QueryableCollection',
    'ProcedureCollection',
    # Errors and validation
    'ProcedureError',
    'ProcedureConstructionError',
    'MalformedProcedureDataError',
    'ProcedureLookupError',
    'ValidationError',
    'ValidationResult',
    'WaypointRouteResult',
]
