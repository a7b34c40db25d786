"""
Parsing of annotated fix tokens.

Procedure segments reference fixes by name, optionally decorated with
modifier characters:

    ^FIXXA      altitude-constraint flag
    @FIXXB      speed-constraint flag
    FIX#270     non-fix directive (e.g. fly heading), has no fix name
    FIXXC*      draw segments only: fix drawn for depiction only

A fix descriptor in a routable segment is either a plain token or a
[token, restriction] pair. Draw segments hold plain tokens only.
"""

from dataclasses import dataclass
from typing import Any, Optional, Union, List, Tuple

from .validation import MalformedProcedureDataError

ALTITUDE_FLAG = '^'
SPEED_FLAG = '@'
VECTOR_MARKER = '#'
DRAW_ONLY_SUFFIX = '*'

FixDescriptor = Union[str, List[Any], Tuple[Any, ...]]


@dataclass(frozen=True)
class FixToken:
    """A fix token with its modifiers resolved."""

    raw: str
    bare_name: Optional[str]  # None for vector directives
    has_altitude_flag: bool = False
    has_speed_flag: bool = False
    is_vector_directive: bool = False
    is_draw_only: bool = False

    @property
    def has_fix_name(self) -> bool:
        return self.bare_name is not None


def descriptor_name(descriptor: FixDescriptor) -> str:
    """
    Return the token part of a fix descriptor.

    Ex:    ['FIXXA', 'A100']    -->    'FIXXA'
           'FIXXA'              -->    'FIXXA'

    Raises:
        MalformedProcedureDataError: if the descriptor is neither a string nor
            a non-empty list/tuple starting with a string
    """
    if isinstance(descriptor, (list, tuple)):
        if not descriptor or not isinstance(descriptor[0], str):
            raise MalformedProcedureDataError(f"Invalid fix descriptor {descriptor!r}")
        return descriptor[0]
    if not isinstance(descriptor, str):
        raise MalformedProcedureDataError(f"Invalid fix descriptor {descriptor!r}")
    return descriptor


def descriptor_restriction(descriptor: FixDescriptor) -> Any:
    """Return the restriction payload of a fix descriptor, or None if it has none."""
    if isinstance(descriptor, (list, tuple)) and len(descriptor) > 1:
        return descriptor[1]
    return None


def parse_fix_descriptor(descriptor: FixDescriptor) -> FixToken:
    """
    Parse a routable fix descriptor into a FixToken.

    A token containing '#' anywhere is a directive and has no fix name.
    Otherwise every '^' and '@' is removed to give the bare fix name.
    """
    raw = descriptor_name(descriptor)

    if VECTOR_MARKER in raw:
        return FixToken(raw=raw, bare_name=None, is_vector_directive=True)

    return FixToken(
        raw=raw,
        bare_name=raw.replace(ALTITUDE_FLAG, '').replace(SPEED_FLAG, ''),
        has_altitude_flag=ALTITUDE_FLAG in raw,
        has_speed_flag=SPEED_FLAG in raw,
    )


def parse_draw_token(token: str) -> FixToken:
    """
    Parse a draw-segment token into a FixToken.

    Only the trailing '*' is meaningful here; draw tokens are plain names.
    """
    if not isinstance(token, str):
        raise MalformedProcedureDataError(f"Invalid draw token {token!r}")

    if token.endswith(DRAW_ONLY_SUFFIX):
        return FixToken(raw=token, bare_name=token[:-len(DRAW_ONLY_SUFFIX)], is_draw_only=True)

    return FixToken(raw=token, bare_name=token)
