"""Executable JZTScript commands.

A command holds only the configuration parsed from its line. The same command
object is shared by every actor running the script, so anything that changes
while a command runs (remaining steps, a stuck direction) lives in the owner's
script context heap instead.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar, Optional

from jztscript.directions import Direction, opposite
from jztscript.ir import (
    CommandResult,
    DirectionExpression,
    Expression,
    ScrollLine,
    ThingTemplate,
)

if TYPE_CHECKING:
    from jztscript.owner import ScriptOwner


COUNT_KEY = "<count>"
STUCK_KEY = "<stuck>"
CYCLES_KEY = "<cycles>"

SELF_RECIPIENT = "SELF"


class Command:
    modifies_scroll: ClassVar[bool] = False

    def execute(self, owner: "ScriptOwner") -> Optional[CommandResult]:
        raise NotImplementedError


@dataclass(frozen=True)
class MoveCommand(Command):
    """Move the owner ``direction.count`` steps.

    A forceful move keeps retrying a blocked direction until it succeeds; a
    gentle move gives up on the first blocked step.
    """

    direction: DirectionExpression
    forceful: bool = True

    def execute(self, owner: "ScriptOwner") -> Optional[CommandResult]:
        if self.forceful:
            return self._forceful_move(owner)
        return self._gentle_move(owner)

    def _gentle_move(self, owner: "ScriptOwner") -> Optional[CommandResult]:
        context = owner.script_context
        direction = self.direction.evaluate(owner)
        if direction is None:
            return CommandResult.NORMAL

        remaining = context.recall(COUNT_KEY, self.direction.count) - 1
        if owner.move(direction) and remaining > 0:
            context.remember(COUNT_KEY, remaining)
            return CommandResult.REPEAT

        context.forget(COUNT_KEY)
        return CommandResult.NORMAL

    def _forceful_move(self, owner: "ScriptOwner") -> Optional[CommandResult]:
        context = owner.script_context
        stuck = context.recall(STUCK_KEY)
        if stuck is not None:
            direction = Direction.from_name(stuck)
        else:
            direction = self.direction.evaluate(owner)
        if direction is None:
            return CommandResult.NORMAL

        remaining = context.recall(COUNT_KEY, self.direction.count)
        if not owner.move(direction):
            context.remember(STUCK_KEY, direction.name)
            context.remember(COUNT_KEY, remaining)
            return CommandResult.REPEAT

        context.forget(STUCK_KEY)
        remaining -= 1
        if remaining > 0:
            context.remember(COUNT_KEY, remaining)
            return CommandResult.REPEAT

        context.forget(COUNT_KEY)
        return CommandResult.NORMAL


@dataclass(frozen=True)
class WaitCommand(Command):
    count: int = 1

    def execute(self, owner: "ScriptOwner") -> Optional[CommandResult]:
        context = owner.script_context
        cycles = context.recall(CYCLES_KEY, self.count) - 1
        if cycles > 0:
            context.remember(CYCLES_KEY, cycles)
            return CommandResult.REPEAT
        context.forget(CYCLES_KEY)
        return CommandResult.NORMAL


@dataclass(frozen=True)
class SayCommand(Command):
    text: str

    def execute(self, owner: "ScriptOwner") -> Optional[CommandResult]:
        owner.say(self.text)
        return CommandResult.CONTINUE


@dataclass(frozen=True)
class EndCommand(Command):
    def execute(self, owner: "ScriptOwner") -> Optional[CommandResult]:
        owner.script_context.stop()
        return CommandResult.NORMAL


@dataclass(frozen=True)
class IfCommand(Command):
    expression: Expression
    label: str

    def execute(self, owner: "ScriptOwner") -> Optional[CommandResult]:
        if self.expression.evaluate(owner) and owner.script_context.jump_to_label(self.label):
            return CommandResult.CONTINUE_AFTER_JUMP
        return CommandResult.CONTINUE


@dataclass(frozen=True)
class PutCommand(Command):
    direction: DirectionExpression
    template: ThingTemplate

    def execute(self, owner: "ScriptOwner") -> Optional[CommandResult]:
        direction = self.direction.evaluate(owner)
        if direction is not None:
            owner.put(direction, self.template)
        return CommandResult.NORMAL


@dataclass(frozen=True)
class SendCommand(Command):
    """Deliver ``message`` to ``recipient``.

    ``SELF`` jumps immediately; any other recipient (including ``ALL``) is
    routed by the owner and seen by the receivers on their next tick.
    """

    recipient: str
    message: str

    def execute(self, owner: "ScriptOwner") -> Optional[CommandResult]:
        if self.recipient == SELF_RECIPIENT:
            if owner.script_context.jump_to_label(self.message):
                return CommandResult.CONTINUE_AFTER_JUMP
            return CommandResult.CONTINUE
        owner.send_message(self.recipient, self.message)
        return CommandResult.CONTINUE


@dataclass(frozen=True)
class SetCommand(Command):
    counter: str
    value: int = 1

    def execute(self, owner: "ScriptOwner") -> Optional[CommandResult]:
        owner.set_counter_value(self.counter, self.value)
        return CommandResult.CONTINUE


@dataclass(frozen=True)
class GiveCommand(Command):
    counter: str
    amount: int

    def execute(self, owner: "ScriptOwner") -> Optional[CommandResult]:
        owner.adjust_counter(self.counter, self.amount)
        return CommandResult.CONTINUE


@dataclass(frozen=True)
class TakeCommand(Command):
    """Subtract ``amount`` from ``counter``, or jump to ``label`` if short."""

    counter: str
    amount: int
    label: Optional[str] = None

    def execute(self, owner: "ScriptOwner") -> Optional[CommandResult]:
        if owner.get_counter_value(self.counter) < self.amount:
            if self.label is not None and owner.script_context.jump_to_label(self.label):
                return CommandResult.CONTINUE_AFTER_JUMP
            return CommandResult.NORMAL
        owner.adjust_counter(self.counter, -self.amount)
        return CommandResult.CONTINUE


@dataclass(frozen=True)
class BecomeCommand(Command):
    template: ThingTemplate

    def execute(self, owner: "ScriptOwner") -> Optional[CommandResult]:
        owner.replace(self.template)
        return CommandResult.NORMAL


@dataclass(frozen=True)
class ChangeCommand(Command):
    from_template: ThingTemplate
    to_template: ThingTemplate

    def execute(self, owner: "ScriptOwner") -> Optional[CommandResult]:
        owner.change_tiles(self.from_template, self.to_template)
        return CommandResult.CONTINUE


@dataclass(frozen=True)
class CharCommand(Command):
    code: int

    def execute(self, owner: "ScriptOwner") -> Optional[CommandResult]:
        owner.set_character(self.code)
        return CommandResult.NORMAL


@dataclass(frozen=True)
class DieCommand(Command):
    magnetically: bool = False

    def execute(self, owner: "ScriptOwner") -> Optional[CommandResult]:
        pull = opposite(owner.player_direction()) if self.magnetically else None
        owner.remove()
        if self.magnetically:
            owner.push_player(pull)
        return CommandResult.NORMAL


@dataclass(frozen=True)
class TorchCommand(Command):
    radius: int = 0

    def execute(self, owner: "ScriptOwner") -> Optional[CommandResult]:
        owner.set_torch_radius(self.radius)
        return CommandResult.NORMAL


@dataclass(frozen=True)
class ShootCommand(Command):
    direction: DirectionExpression

    def execute(self, owner: "ScriptOwner") -> Optional[CommandResult]:
        direction = self.direction.evaluate(owner)
        if direction is not None:
            owner.shoot(direction, False)
        return CommandResult.NORMAL


@dataclass(frozen=True)
class ThrowStarCommand(Command):
    direction: DirectionExpression

    def execute(self, owner: "ScriptOwner") -> Optional[CommandResult]:
        direction = self.direction.evaluate(owner)
        if direction is not None:
            owner.shoot(direction, True)
        return CommandResult.NORMAL


@dataclass(frozen=True)
class WalkCommand(Command):
    direction: DirectionExpression

    def execute(self, owner: "ScriptOwner") -> Optional[CommandResult]:
        owner.set_walk_direction(self.direction.evaluate(owner))
        return CommandResult.CONTINUE


@dataclass(frozen=True)
class StandCommand(Command):
    def execute(self, owner: "ScriptOwner") -> Optional[CommandResult]:
        owner.set_walk_direction(None)
        return CommandResult.NORMAL


@dataclass(frozen=True)
class LockCommand(Command):
    def execute(self, owner: "ScriptOwner") -> Optional[CommandResult]:
        owner.script_context.locked = True
        return CommandResult.CONTINUE


@dataclass(frozen=True)
class UnlockCommand(Command):
    def execute(self, owner: "ScriptOwner") -> Optional[CommandResult]:
        owner.script_context.locked = False
        return CommandResult.CONTINUE


@dataclass(frozen=True)
class ScrollCommand(Command):
    text: str
    bold: bool = False
    label: Optional[str] = None

    modifies_scroll: ClassVar[bool] = True

    def execute(self, owner: "ScriptOwner") -> Optional[CommandResult]:
        owner.script_context.add_scroll_line(ScrollLine(self.text, self.bold, self.label))
        return CommandResult.CONTINUE


@dataclass(frozen=True)
class RestoreCommand(Command):
    label: str

    def execute(self, owner: "ScriptOwner") -> Optional[CommandResult]:
        owner.script_context.restore_label(self.label)
        return CommandResult.CONTINUE


@dataclass(frozen=True)
class ZapCommand(Command):
    label: str

    def execute(self, owner: "ScriptOwner") -> Optional[CommandResult]:
        owner.script_context.zap_label(self.label)
        return CommandResult.CONTINUE


@dataclass(frozen=True)
class PlayCommand(Command):
    notation: str

    def execute(self, owner: "ScriptOwner") -> Optional[CommandResult]:
        owner.play(self.notation, True)
        return CommandResult.CONTINUE


@dataclass(frozen=True)
class VictoryCommand(Command):
    def execute(self, owner: "ScriptOwner") -> Optional[CommandResult]:
        owner.victory()
        return CommandResult.NORMAL
