from enum import Enum
from typing import Optional, Union


class ProcedureType(Enum):
    """
    Type of instrument procedure.

    The type decides how the raw airport fields map onto entries and exits:
    a SID is joined at a runway and left at a published exit, a STAR is
    joined at a published entry and left at a runway.
    """
    SID = "SID"    # Standard Instrument Departure
    STAR = "STAR"  # Standard Terminal Arrival Route

    @classmethod
    def parse(cls, value: Union['ProcedureType', str, None]) -> Optional['ProcedureType']:
        """
        Create a procedure type from an enum member or a string.

        Args:
            value: ProcedureType or string such as "SID" or "star"

        Returns:
            Matching ProcedureType, or None if the value is not recognised
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().upper())
        except ValueError:
            return None

    def __str__(self) -> str:
        return self.value
