import logging
import re
from dataclasses import dataclass, field
from typing import Any, Optional

from .fix_token import FixToken, FixDescriptor, parse_fix_descriptor, descriptor_restriction

logger = logging.getLogger(__name__)

# e.g. "A80+", "S210-", "A50"
RESTRICTION_PATTERN = re.compile(r'^([AS])(\d+)([+-]?)$')
RESTRICTION_SEPARATOR = '|'
ALTITUDE_UNIT_FT = 100


@dataclass
class ProcedureWaypoint:
    """
    A single waypoint of a procedure route, built from one fix descriptor.

    The restriction payload is kept verbatim in `restriction`. When it is a
    string of the form "A80+|S210" the altitude (hundreds of feet) and speed
    (knots) limits are decoded:

        A80+    at or above 8000ft
        A120-   at or below 12000ft
        S210    at 210kt exactly
    """

    token: FixToken
    restriction: Any = None
    altitude_minimum: Optional[int] = None  # feet
    altitude_maximum: Optional[int] = None  # feet
    speed_minimum: Optional[int] = None  # knots
    speed_maximum: Optional[int] = None  # knots
    vector_heading: Optional[int] = None
    _descriptor: Any = field(default=None, repr=False, compare=False)

    @classmethod
    def from_descriptor(cls, descriptor: FixDescriptor) -> 'ProcedureWaypoint':
        """
        Create a waypoint from a fix descriptor.

        Args:
            descriptor: 'FIXXA' or ['FIXXA', 'A80+|S210']

        Returns:
            ProcedureWaypoint for the descriptor
        """
        token = parse_fix_descriptor(descriptor)
        waypoint = cls(token=token, restriction=descriptor_restriction(descriptor), _descriptor=descriptor)

        if token.is_vector_directive:
            heading = token.raw.split('#', 1)[1]
            if heading.isdigit():
                waypoint.vector_heading = int(heading)

        if isinstance(waypoint.restriction, str):
            waypoint._parse_restriction(waypoint.restriction)

        return waypoint

    def _parse_restriction(self, restriction: str) -> None:
        for part in restriction.split(RESTRICTION_SEPARATOR):
            part = part.strip()
            if not part:
                continue

            match = RESTRICTION_PATTERN.match(part.upper())
            if not match:
                logger.warning(f"Ignoring unparseable restriction '{part}' on {self.raw_name}")
                continue

            kind, value, limit = match.groups()
            value = int(value)
            if kind == 'A':
                value *= ALTITUDE_UNIT_FT
                if limit != '-':
                    self.altitude_minimum = value
                if limit != '+':
                    self.altitude_maximum = value
            else:
                if limit != '-':
                    self.speed_minimum = value
                if limit != '+':
                    self.speed_maximum = value

    @property
    def name(self) -> Optional[str]:
        """Bare fix name, None for vector directives."""
        return self.token.bare_name

    @property
    def raw_name(self) -> str:
        return self.token.raw

    @property
    def descriptor(self) -> Any:
        """The fix descriptor this waypoint was built from."""
        return self._descriptor

    @property
    def is_vector(self) -> bool:
        return self.token.is_vector_directive

    def has_altitude_restriction(self) -> bool:
        return self.altitude_minimum is not None or self.altitude_maximum is not None

    def has_speed_restriction(self) -> bool:
        return self.speed_minimum is not None or self.speed_maximum is not None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            'name': self.name,
            'raw_name': self.raw_name,
            'restriction': self.restriction,
            'altitude_minimum': self.altitude_minimum,
            'altitude_maximum': self.altitude_maximum,
            'speed_minimum': self.speed_minimum,
            'speed_maximum': self.speed_maximum,
            'vector_heading': self.vector_heading,
        }

    def __str__(self):
        result = self.name or self.raw_name
        if self.restriction is not None:
            result += f" [{self.restriction}]"
        return result
