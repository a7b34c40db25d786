import copy
import logging
import random
from collections.abc import Mapping
from typing import Any, Callable, Dict, List, Optional, Union

from .fix_token import FixDescriptor, parse_fix_descriptor, parse_draw_token
from .procedure_type import ProcedureType
from .procedure_waypoint import ProcedureWaypoint
from .validation import (
    MalformedProcedureDataError,
    ProcedureConstructionError,
    ProcedureError,
    ProcedureLookupError,
    ValidationResult,
    WaypointRouteResult,
)

logger = logging.getLogger(__name__)

WaypointFactory = Callable[[FixDescriptor], Any]

# Raw airport-file keys holding the entry and exit segments, per type
SEGMENT_KEYS = {
    ProcedureType.SID: ('rwy', 'exitPoints'),
    ProcedureType.STAR: ('entryPoints', 'rwy'),
}


def _unique(names: List[str]) -> List[str]:
    """Remove duplicates, keeping first occurrence order."""
    return list(dict.fromkeys(names))


class ProcedureDefinition:
    """
    An instrument procedure (SID or STAR) as published in an airport file.

    A procedure is made of a body, flown by every aircraft on the procedure,
    plus a set of entries (ways to join the body) and exits (ways to leave
    it). Given an entry and an exit the procedure produces the ordered list of
    waypoints to fly:

        entry segment  +  body  +  exit segment

    The draw segments describe the lines to depict the procedure on a scope
    and are not used for navigation.

    Examples:
        sid = ProcedureDefinition(ProcedureType.SID, {
            'icao': 'OFFSH9',
            'name': 'Offshore Nine',
            'rwy': {'25L': ['A1'], '25R': ['A2']},
            'body': ['C1'],
            'exitPoints': {'NORTH': ['B1', ['B2', 'A80+']]},
            'draw': [['A1', 'C1', 'B1', 'B2*']],
        })
        sid.get_waypoints_for_entry_and_exit('25L', 'NORTH')  # A1, C1, B1, B2
    """

    def __init__(self, procedure_type: Union[ProcedureType, str], data: Optional[Dict[str, Any]],
                 waypoint_factory: Optional[WaypointFactory] = None, rng: Optional[random.Random] = None):
        """
        Initialize a procedure definition.

        Args:
            procedure_type: ProcedureType (or its string value)
            data: Raw procedure data from the airport file
            waypoint_factory: Callable building a waypoint from a fix descriptor,
                defaults to ProcedureWaypoint.from_descriptor
            rng: Random source used by get_random_exit_point

        Raises:
            ProcedureConstructionError: if data is missing or the type is unknown
        """
        if data is None:
            raise ProcedureConstructionError(f"Expected valid procedure data, but received '{data}'")

        self._waypoint_factory = waypoint_factory or ProcedureWaypoint.from_descriptor
        self._rng = rng

        self._body: List[FixDescriptor] = []
        self._draw: List[List[str]] = []
        self._entry_points: Dict[str, List[FixDescriptor]] = {}
        self._exit_points: Dict[str, List[FixDescriptor]] = {}
        self._entry_names: List[str] = []
        self._exit_names: List[str] = []
        self._icao = ''
        self._name = ''
        self._procedure_type: Optional[ProcedureType] = None

        self.init(procedure_type, data)

    # ------------------------------ LIFECYCLE ------------------------------

    def init(self, procedure_type: Union[ProcedureType, str], data: Dict[str, Any]) -> 'ProcedureDefinition':
        """
        Store the raw procedure data.

        Entries and exits are decoded according to the procedure type so that
        every other method is type agnostic.
        """
        if not isinstance(data, Mapping):
            raise ProcedureConstructionError(f"Expected valid procedure data, but received '{data}'")

        parsed_type = ProcedureType.parse(procedure_type)
        if parsed_type is None:
            raise ProcedureConstructionError(
                f"Expected procedure definition with known type, but received unknown type '{procedure_type}'"
            )

        entry_key, exit_key = SEGMENT_KEYS[parsed_type]
        entry_points = self._segment_map(data, entry_key, data.get('icao'))
        exit_points = self._segment_map(data, exit_key, data.get('icao'))

        self._body = copy.deepcopy(data.get('body') or [])
        self._draw = copy.deepcopy(data.get('draw') or [])
        self._icao = data.get('icao') or ''
        self._name = data.get('name') or ''
        self._procedure_type = parsed_type
        self._entry_points = entry_points
        self._exit_points = exit_points
        self._entry_names = list(entry_points.keys())
        self._exit_names = list(exit_points.keys())

        logger.debug(f"Initialized {parsed_type} {self._icao} with {len(self._entry_names)} entries, "
                     f"{len(self._body)} body fixes and {len(self._exit_names)} exits")
        return self

    @staticmethod
    def _segment_map(data: Mapping, key: str, icao: Optional[str]) -> Dict[str, List[FixDescriptor]]:
        segments = data.get(key)
        if segments is None:
            return {}
        if not isinstance(segments, Mapping):
            raise ProcedureConstructionError(
                f"Expected '{key}' of {icao} to map names to fix lists, but received '{segments}'"
            )
        return copy.deepcopy(dict(segments))

    def reset(self) -> 'ProcedureDefinition':
        """Clear all data, used when the airport is unloaded."""
        self._body = []
        self._draw = []
        self._entry_points = {}
        self._exit_points = {}
        self._entry_names = []
        self._exit_names = []
        self._icao = ''
        self._name = ''
        self._procedure_type = None
        return self

    # ------------------------------ ACCESSORS ------------------------------

    @property
    def icao(self) -> str:
        return self._icao

    @property
    def name(self) -> str:
        """Spoken name of the procedure, spelled for speech synthesis."""
        return self._name

    @property
    def procedure_type(self) -> Optional[ProcedureType]:
        return self._procedure_type

    @property
    def draw(self) -> List[List[str]]:
        """Line segments to depict the procedure, e.g. [['FIXXA', 'FIXXB*'], ['FIXXA', 'FIXXC']]."""
        return copy.deepcopy(self._draw)

    @property
    def body(self) -> List[FixDescriptor]:
        return copy.deepcopy(self._body)

    @property
    def entry_points(self) -> Dict[str, List[FixDescriptor]]:
        return copy.deepcopy(self._entry_points)

    @property
    def exit_points(self) -> Dict[str, List[FixDescriptor]]:
        return copy.deepcopy(self._exit_points)

    @property
    def entry_names(self) -> List[str]:
        return list(self._entry_names)

    @property
    def exit_names(self) -> List[str]:
        return list(self._exit_names)

    def is_sid(self) -> bool:
        return self._procedure_type == ProcedureType.SID

    def is_star(self) -> bool:
        return self._procedure_type == ProcedureType.STAR

    def has_entry(self, entry_name: str) -> bool:
        """Check if the procedure can be joined at the named entry."""
        return entry_name in self._entry_points

    def has_exit(self, exit_name: str) -> bool:
        """Check if the procedure can be left at the named exit."""
        return exit_name in self._exit_points

    # ------------------------------ QUERIES ------------------------------

    def get_all_fix_names_in_use(self) -> List[str]:
        """
        Get the names of all fixes used anywhere in this procedure.

        Names are collected from the entries, the body, the exits and finally
        the draw segments, in that order, without duplicates. Modifier
        characters are stripped and heading directives are left out.

        Returns:
            List of unique fix names in first-occurrence order

        Raises:
            MalformedProcedureDataError: if the draw segments are not a list of lists
        """
        if not self._draw or not isinstance(self._draw[0], (list, tuple)):
            raise MalformedProcedureDataError(
                f"Invalid data set in draw segment of the {self._icao} procedure. Expected a 2D "
                "list: [[FIXXA, FIXXB*], [FIXXC, FIXXD*]]",
                icao=self._icao,
            )

        entry_fix_names = self._get_fix_names_from_segments(self._entry_points)
        body_fix_names = self._get_fix_names_from_segment(self._body)
        exit_fix_names = self._get_fix_names_from_segments(self._exit_points)
        draw_fix_names = self._get_fix_names_from_draw()

        return _unique(entry_fix_names + body_fix_names + exit_fix_names + draw_fix_names)

    def get_random_exit_point(self, rng: Optional[random.Random] = None) -> str:
        """
        Pick one of the exits at random (uniformly).

        Args:
            rng: Random source, defaults to the one given at construction

        Returns:
            Name of the selected exit

        Raises:
            ProcedureLookupError: if the procedure has no exits
        """
        if not self._exit_names:
            raise ProcedureLookupError(f"Procedure {self._icao} has no exit points",
                                       icao=self._icao, kind='exit')

        if rng is None:
            rng = self._rng if self._rng is not None else random
        index = rng.randint(0, len(self._exit_names) - 1)
        return self._exit_names[index]

    def resolve_waypoints(self, entry: str, exit: str) -> WaypointRouteResult:
        """
        Resolve the waypoints for an entry and exit without raising.

        Args:
            entry: Name of the requested entry point
            exit: Name of the requested exit point

        Returns:
            WaypointRouteResult holding either the waypoints or the reason for failure
        """
        if not self.has_entry(entry):
            return WaypointRouteResult.failure(
                self._icao, 'entry', f"Expected valid entry of {self._icao}, but received {entry}",
                entry, entry=entry, exit=exit,
            )

        if not self.has_exit(exit):
            return WaypointRouteResult.failure(
                self._icao, 'exit', f"Expected valid exit of {self._icao}, but received {exit}",
                exit, entry=entry, exit=exit,
            )

        waypoints = (
            self._generate_waypoints_for_entry(entry)
            + self._generate_waypoints_for_body()
            + self._generate_waypoints_for_exit(exit)
        )
        return WaypointRouteResult(icao=self._icao, entry=entry, exit=exit, waypoints=waypoints)

    def get_waypoints_for_entry_and_exit(self, entry: str, exit: str) -> Optional[List[Any]]:
        """
        Get all waypoints to fly from an entry point to an exit point.

        An unknown entry or exit is logged and None is returned, so callers
        can retry with another entry or exit.

        Args:
            entry: Name of the requested entry point
            exit: Name of the requested exit point

        Returns:
            List of waypoints (entry, body, then exit) or None if the entry or exit is invalid

        Raises:
            MalformedProcedureDataError: if a segment of the route is not a list of fixes
        """
        result = self.resolve_waypoints(entry, exit)
        if not result.is_valid:
            for error in result.errors:
                logger.error(error.message)
            return None
        return result.waypoints

    def validate(self) -> ValidationResult:
        """
        Check the structure of the stored data without raising.

        Returns:
            ValidationResult listing malformed segments as errors and entry/exit
            combinations producing fewer than two waypoints as warnings
        """
        result = ValidationResult()

        if not self._draw or not isinstance(self._draw[0], (list, tuple)):
            result.add_error('draw', 'expected a list of fix lists', self._draw)
        else:
            for index, segment in enumerate(self._draw):
                if not isinstance(segment, (list, tuple)):
                    result.add_error(f'draw[{index}]', 'expected a list of fixes', segment)
                    continue
                for token in segment:
                    if not isinstance(token, str):
                        result.add_error(f'draw[{index}]', 'invalid draw token', token)

        self._validate_segment(result, 'body', self._body)
        for name, segment in self._entry_points.items():
            self._validate_segment(result, f'entry[{name}]', segment)
        for name, segment in self._exit_points.items():
            self._validate_segment(result, f'exit[{name}]', segment)

        if not self._entry_names:
            result.add_warning(f"{self._icao} has no entry points")
        if not self._exit_names:
            result.add_warning(f"{self._icao} has no exit points")

        if result.is_valid:
            for entry in self._entry_names:
                for exit in self._exit_names:
                    length = len(self._entry_points[entry]) + len(self._body) + len(self._exit_points[exit])
                    if length < 2:
                        result.add_warning(f"{self._icao} route {entry} -> {exit} has only {length} waypoint(s)")

        return result

    @staticmethod
    def _validate_segment(result: ValidationResult, field: str, segment: Any) -> None:
        if not isinstance(segment, (list, tuple)):
            result.add_error(field, 'expected a list of fix descriptors', segment)
            return
        for descriptor in segment:
            try:
                parse_fix_descriptor(descriptor)
            except ProcedureError as e:
                result.add_error(field, str(e), descriptor)

    def to_dict(self) -> dict:
        """
        Convert back to the raw airport-file shape, for JSON serialization.

        Entries and exits are written under the keys their procedure type
        reads them from, so the result can be passed back to the constructor.
        """
        entry_key, exit_key = SEGMENT_KEYS.get(self._procedure_type, ('entryPoints', 'exitPoints'))
        result = {
            'icao': self._icao,
            'name': self._name,
            'procedure_type': self._procedure_type.value if self._procedure_type else None,
            'body': self.body,
            'draw': self.draw,
        }
        result[entry_key] = self.entry_points
        result[exit_key] = self.exit_points
        return result

    # ------------------------------ PRIVATE ------------------------------

    def _check_segment(self, segment: Any) -> List[FixDescriptor]:
        if not isinstance(segment, (list, tuple)):
            raise MalformedProcedureDataError(
                f"Invalid segment in the {self._icao} procedure. "
                f"Expected a list of fixes but received '{segment}'",
                icao=self._icao,
            )
        return segment

    def _build_waypoints(self, segment: List[FixDescriptor]) -> List[Any]:
        return [self._waypoint_factory(descriptor) for descriptor in self._check_segment(segment)]

    def _generate_waypoints_for_body(self) -> List[Any]:
        return self._build_waypoints(self._body)

    def _generate_waypoints_for_entry(self, entry_point: str) -> List[Any]:
        if entry_point not in self._entry_points:
            raise ProcedureLookupError(f"Expected valid entry of {self._icao}, but received {entry_point}",
                                       icao=self._icao, key=entry_point, kind='entry')
        return self._build_waypoints(self._entry_points[entry_point])

    def _generate_waypoints_for_exit(self, exit_point: str) -> List[Any]:
        if exit_point not in self._exit_points:
            raise ProcedureLookupError(f"Expected valid exit of {self._icao}, but received {exit_point}",
                                       icao=self._icao, key=exit_point, kind='exit')
        return self._build_waypoints(self._exit_points[exit_point])

    def _get_fix_names_from_segment(self, segment: List[FixDescriptor]) -> List[str]:
        names = []
        for descriptor in self._check_segment(segment):
            token = parse_fix_descriptor(descriptor)
            if token.has_fix_name:
                names.append(token.bare_name)
        return names

    def _get_fix_names_from_segments(self, segments: Dict[str, List[FixDescriptor]]) -> List[str]:
        names = []
        for segment in segments.values():
            names.extend(self._get_fix_names_from_segment(segment))
        return _unique(names)

    def _get_fix_names_from_draw(self) -> List[str]:
        names = []
        for segment in self._draw:
            if not isinstance(segment, (list, tuple)):
                raise MalformedProcedureDataError(
                    f"Invalid data set in draw segment of the {self._icao} procedure. "
                    f"Expected a list of fixes but received '{segment}'",
                    icao=self._icao,
                )
            names.extend(parse_draw_token(token).bare_name for token in segment)
        return names

    def __repr__(self):
        return (f"ProcedureDefinition(icao='{self._icao}', type='{self._procedure_type}', "
                f"entries={len(self._entry_names)}, exits={len(self._exit_names)})")

    def __str__(self):
        result = f"{self._icao} ({self._procedure_type})"
        if self._name:
            result += f" - {self._name}"
        return result
