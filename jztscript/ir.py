from __future__ import annotations

import operator
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Callable, Mapping, Optional, Tuple

from jztscript.directions import Direction, DirectionModifier, DirectionTerminal

if TYPE_CHECKING:
    from jztscript.owner import ScriptOwner


class CommandResult(Enum):
    NORMAL = "normal"
    CONTINUE = "continue"
    CONTINUE_AFTER_JUMP = "continue_after_jump"
    REPEAT = "repeat"


@dataclass(frozen=True)
class Label:
    """Jump target marker; recorded in the label table, never executed."""

    name: str


@dataclass(frozen=True)
class ThingTemplate:
    type: str
    color: Optional[str] = None


@dataclass(frozen=True)
class ScrollLine:
    text: str
    bold: bool = False
    label: Optional[str] = None


# Expressions

class Expression:
    def evaluate(self, owner: "ScriptOwner"):
        raise NotImplementedError


@dataclass(frozen=True)
class DirectionExpression(Expression):
    """A direction terminal transformed by modifiers, with a repeat count.

    Modifiers are applied last-declared first: ``CW CCW N`` is ``CW(CCW(N))``.
    """

    terminal: DirectionTerminal
    modifiers: Tuple[DirectionModifier, ...] = ()
    count: int = 1

    def evaluate(self, owner: "ScriptOwner") -> Optional[Direction]:
        direction = self.terminal.resolve(owner)
        for modifier in reversed(self.modifiers):
            direction = modifier.apply(direction)
        return direction


@dataclass(frozen=True)
class NotExpression(Expression):
    expression: Expression

    def evaluate(self, owner: "ScriptOwner") -> bool:
        return not self.expression.evaluate(owner)


@dataclass(frozen=True)
class AdjacentExpression(Expression):
    def evaluate(self, owner: "ScriptOwner") -> bool:
        return bool(owner.is_player_adjacent())


@dataclass(frozen=True)
class BlockedExpression(Expression):
    direction: DirectionExpression

    def evaluate(self, owner: "ScriptOwner") -> bool:
        return bool(owner.is_blocked(self.direction.evaluate(owner)))


@dataclass(frozen=True)
class AlignedExpression(Expression):
    direction: Optional[DirectionExpression] = None

    def evaluate(self, owner: "ScriptOwner") -> bool:
        if self.direction is None:
            return bool(owner.is_player_aligned())
        return bool(owner.is_player_aligned(self.direction.evaluate(owner)))


@dataclass(frozen=True)
class PeepExpression(Expression):
    radius: int = 5

    def evaluate(self, owner: "ScriptOwner") -> bool:
        return bool(owner.is_player_visible(self.radius))


@dataclass(frozen=True)
class ExistsExpression(Expression):
    template: ThingTemplate
    count: int = 1

    def evaluate(self, owner: "ScriptOwner") -> bool:
        return bool(owner.has_tile(self.template, self.count))


COMPARISONS: Mapping[str, Callable[[int, int], bool]] = MappingProxyType(
    {
        ">": operator.gt,
        "<": operator.lt,
        ">=": operator.ge,
        "<=": operator.le,
        "=": operator.eq,
    }
)


@dataclass(frozen=True)
class TestingExpression(Expression):
    counter: str
    operator: str
    value: int

    __test__ = False

    def __post_init__(self):
        if self.operator not in COMPARISONS:
            raise ValueError(f"Unsupported comparison operator '{self.operator}'.")

    def evaluate(self, owner: "ScriptOwner") -> bool:
        return COMPARISONS[self.operator](owner.get_counter_value(self.counter), self.value)
