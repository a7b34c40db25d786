"""
Instrument procedure (SID/STAR) models for air traffic control simulation.

The main public API includes:
- ProcedureDefinition: a SID or STAR with its body, entries, exits and draw segments
- ProcedureCollection: the procedure catalog of an airport
- ProcedureWaypoint: a waypoint built from a fix descriptor
"""

from .models import (
    ProcedureType,
    ProcedureDefinition,
    ProcedureWaypoint,
    ProcedureCollection,
    ProcedureError,
    ProcedureConstructionError,
    MalformedProcedureDataError,
    ProcedureLookupError,
)

__version__ = '0.1.0'
__all__ = [
    'ProcedureType',
    'ProcedureDefinition',
    'ProcedureWaypoint',
    'ProcedureCollection',
    'ProcedureError',
    'ProcedureConstructionError',
    'MalformedProcedureDataError',
    'ProcedureLookupError',
]
