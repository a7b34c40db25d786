"""
Specialized queryable collection for ProcedureDefinition objects.

Holds the SIDs and STARs of an airport and answers the catalog-level
queries: find a procedure by identifier, route through it, and list every
fix referenced by any procedure.
"""

import logging
import random
from typing import Any, Dict, List, Optional, Union

import pandas as pd

from .queryable_collection import QueryableCollection
from .procedure_definition import ProcedureDefinition, WaypointFactory
from .procedure_type import ProcedureType
from .validation import ValidationResult

logger = logging.getLogger(__name__)

# Airport file section holding each procedure type
AIRPORT_SECTIONS = {
    ProcedureType.SID: 'sids',
    ProcedureType.STAR: 'stars',
}


class ProcedureCollection(QueryableCollection[ProcedureDefinition]):
    """
    Catalog of the instrument procedures of an airport.

    Examples:
        procedures = ProcedureCollection.from_airport_data(airport_json)

        # Departures joinable from runway 25L
        procedures.sids().with_entry('25L')

        # Route through a procedure
        procedures.get_waypoints('OFFSH9', '25L', 'NORTH')
    """

    @classmethod
    def from_airport_data(cls, data: Dict[str, Any], waypoint_factory: Optional[WaypointFactory] = None,
                          rng: Optional[random.Random] = None) -> 'ProcedureCollection':
        """
        Build the catalog from the 'sids' and 'stars' sections of airport data.

        Args:
            data: Airport data, e.g. {'sids': {'OFFSH9': {...}}, 'stars': {...}}
            waypoint_factory: Passed to every ProcedureDefinition
            rng: Passed to every ProcedureDefinition

        Returns:
            New ProcedureCollection

        Raises:
            ProcedureConstructionError: if any procedure cannot be built
        """
        procedures = []
        for procedure_type, section in AIRPORT_SECTIONS.items():
            for icao, raw in (data.get(section) or {}).items():
                if isinstance(raw, dict) and not raw.get('icao'):
                    raw = dict(raw, icao=icao)
                procedures.append(ProcedureDefinition(procedure_type, raw, waypoint_factory=waypoint_factory, rng=rng))

        collection = cls(procedures)
        logger.info(f"Loaded {len(collection.sids())} SIDs and {len(collection.stars())} STARs")
        return collection

    def sids(self) -> 'ProcedureCollection':
        return ProcedureCollection([p for p in self._items if p.is_sid()])

    def stars(self) -> 'ProcedureCollection':
        return ProcedureCollection([p for p in self._items if p.is_star()])

    def with_entry(self, entry_name: str) -> 'ProcedureCollection':
        """Filter to procedures that can be joined at the named entry."""
        return ProcedureCollection([p for p in self._items if p.has_entry(entry_name)])

    def with_exit(self, exit_name: str) -> 'ProcedureCollection':
        """Filter to procedures that can be left at the named exit."""
        return ProcedureCollection([p for p in self._items if p.has_exit(exit_name)])

    def find_by_icao(self, icao: str, procedure_type: Union[ProcedureType, str, None] = None
                     ) -> Optional[ProcedureDefinition]:
        """
        Find a procedure by identifier (case-insensitive).

        Args:
            icao: Procedure identifier
            procedure_type: Restrict the search to SIDs or STARs, for airports
                publishing a SID and a STAR under the same identifier

        Returns:
            The procedure, or None if not in the catalog
        """
        if not icao:
            return None
        wanted_type = ProcedureType.parse(procedure_type)
        if procedure_type is not None and wanted_type is None:
            return None

        icao_upper = icao.upper()
        for procedure in self._items:
            if wanted_type is not None and procedure.procedure_type != wanted_type:
                continue
            if procedure.icao.upper() == icao_upper:
                return procedure
        return None

    def get_waypoints(self, icao: str, entry: str, exit: str,
                      procedure_type: Union[ProcedureType, str, None] = None) -> Optional[List[Any]]:
        """
        Get the waypoints for an entry and exit of the named procedure.

        Unknown procedures, entries and exits are logged and give None.
        """
        procedure = self.find_by_icao(icao, procedure_type)
        if procedure is None:
            logger.error(f"Expected valid procedure, but received {icao}")
            return None
        return procedure.get_waypoints_for_entry_and_exit(entry, exit)

    def get_all_fix_names_in_use(self) -> List[str]:
        """
        Get the names of all fixes used by any procedure, without duplicates.

        Raises:
            MalformedProcedureDataError: if any procedure has malformed draw segments
        """
        names: Dict[str, None] = {}
        for procedure in self._items:
            names.update(dict.fromkeys(procedure.get_all_fix_names_in_use()))
        return list(names)

    def validate(self) -> ValidationResult:
        """Validate every procedure, prefixing problems with the procedure identifier."""
        result = ValidationResult()
        for procedure in self._items:
            result.merge(procedure.validate(), prefix=procedure.icao)

        for warning in result.warnings:
            logger.warning(warning)
        return result

    def reset(self) -> 'ProcedureCollection':
        """Reset every procedure, used when the airport is unloaded."""
        for procedure in self._items:
            procedure.reset()
        self._items = []
        return self

    def to_dataframe(self) -> pd.DataFrame:
        """
        Summarize the catalog as a DataFrame, one row per procedure.

        Columns: icao, name, procedure_type, entries, exits, body_length
        """
        rows = [
            {
                'icao': p.icao,
                'name': p.name,
                'procedure_type': p.procedure_type.value if p.procedure_type else None,
                'entries': ','.join(p.entry_names),
                'exits': ','.join(p.exit_names),
                'body_length': len(p.body),
            }
            for p in self._items
        ]
        return pd.DataFrame(rows, columns=['icao', 'name', 'procedure_type', 'entries', 'exits', 'body_length'])
