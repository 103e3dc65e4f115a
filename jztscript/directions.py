from __future__ import annotations

import random
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Callable, Mapping, Optional, Sequence

if TYPE_CHECKING:
    from jztscript.owner import ScriptOwner


class Direction(Enum):
    NORTH = (0, -1)
    EAST = (1, 0)
    SOUTH = (0, 1)
    WEST = (-1, 0)

    @property
    def dx(self) -> int:
        return self.value[0]

    @property
    def dy(self) -> int:
        return self.value[1]

    @property
    def short_name(self) -> str:
        return self.name[0]

    @classmethod
    def from_name(cls, name: str) -> Optional["Direction"]:
        name = name.upper()
        for direction in cls:
            if name in (direction.name, direction.short_name):
                return direction
        return None


_CLOCKWISE_ORDER = (Direction.NORTH, Direction.EAST, Direction.SOUTH, Direction.WEST)


def clockwise(direction: Optional[Direction]) -> Optional[Direction]:
    if direction is None:
        return None
    return _CLOCKWISE_ORDER[(_CLOCKWISE_ORDER.index(direction) + 1) % 4]


def counter_clockwise(direction: Optional[Direction]) -> Optional[Direction]:
    if direction is None:
        return None
    return _CLOCKWISE_ORDER[(_CLOCKWISE_ORDER.index(direction) - 1) % 4]


def opposite(direction: Optional[Direction]) -> Optional[Direction]:
    if direction is None:
        return None
    return _CLOCKWISE_ORDER[(_CLOCKWISE_ORDER.index(direction) + 2) % 4]


def random_direction(candidates: Optional[Sequence[Direction]] = None) -> Optional[Direction]:
    """Pick uniformly from ``candidates`` (all four when omitted); None if empty."""
    if candidates is None:
        candidates = _CLOCKWISE_ORDER
    if not candidates:
        return None
    return random.choice(list(candidates))


def random_perpendicular(direction: Optional[Direction]) -> Optional[Direction]:
    if direction is None:
        return None
    if direction in (Direction.NORTH, Direction.SOUTH):
        return random_direction((Direction.EAST, Direction.WEST))
    return random_direction((Direction.NORTH, Direction.SOUTH))


@dataclass(frozen=True)
class DirectionTerminal:
    """A direction selector evaluated against an owner."""

    keyword: str
    description: str
    resolve: Callable[["ScriptOwner"], Optional[Direction]]


@dataclass(frozen=True)
class DirectionModifier:
    """A transformation applied to an already-resolved direction."""

    keyword: str
    description: str
    apply: Callable[[Optional[Direction]], Optional[Direction]]


def _smart(owner: "ScriptOwner") -> Optional[Direction]:
    return owner.smart_direction() or owner.player_direction()


def _fixed(direction: Direction) -> Callable[["ScriptOwner"], Direction]:
    return lambda owner: direction


_TERMINALS = (
    DirectionTerminal("SEEK", "Toward player", lambda o: o.player_direction()),
    DirectionTerminal("SMART", "Smart seek", _smart),
    DirectionTerminal("FLOW", "Current orientation", lambda o: o.orientation),
    DirectionTerminal("RAND", "Random direction", lambda o: random_direction()),
    DirectionTerminal(
        "RANDF", "Random free direction", lambda o: random_direction(o.get_free_directions())
    ),
    DirectionTerminal(
        "RANDB",
        "Random blocked direction",
        lambda o: random_direction(o.get_blocked_directions()),
    ),
    DirectionTerminal(
        "RNDEW",
        "Randomly East or West",
        lambda o: random_direction((Direction.EAST, Direction.WEST)),
    ),
    DirectionTerminal(
        "RNDNS",
        "Randomly North or South",
        lambda o: random_direction((Direction.NORTH, Direction.SOUTH)),
    ),
    DirectionTerminal(
        "RNDNE",
        "Randomly North or East",
        lambda o: random_direction((Direction.NORTH, Direction.EAST)),
    ),
    DirectionTerminal("NORTH", "North", _fixed(Direction.NORTH)),
    DirectionTerminal("EAST", "East", _fixed(Direction.EAST)),
    DirectionTerminal("SOUTH", "South", _fixed(Direction.SOUTH)),
    DirectionTerminal("WEST", "West", _fixed(Direction.WEST)),
    DirectionTerminal("N", "North shorthand", _fixed(Direction.NORTH)),
    DirectionTerminal("E", "East shorthand", _fixed(Direction.EAST)),
    DirectionTerminal("S", "South shorthand", _fixed(Direction.SOUTH)),
    DirectionTerminal("W", "West shorthand", _fixed(Direction.WEST)),
)

_MODIFIERS = (
    DirectionModifier("CW", "Clockwise", clockwise),
    DirectionModifier("CCW", "Counter-clockwise", counter_clockwise),
    DirectionModifier("OPP", "Opposite", opposite),
    DirectionModifier("RNDP", "Perpendicularly random", random_perpendicular),
)

DIRECTION_TERMINALS: Mapping[str, DirectionTerminal] = MappingProxyType(
    {terminal.keyword: terminal for terminal in _TERMINALS}
)
DIRECTION_MODIFIERS: Mapping[str, DirectionModifier] = MappingProxyType(
    {modifier.keyword: modifier for modifier in _MODIFIERS}
)
