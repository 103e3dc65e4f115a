"""Per-actor script interpreter."""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Deque, Dict, List, Mapping, Optional

from jztscript.commands import Command
from jztscript.errors import ScriptRuntimeFault
from jztscript.ir import CommandResult, ScrollLine
from jztscript.script import Script

if TYPE_CHECKING:
    from jztscript.owner import ScriptOwner

logger = logging.getLogger(__name__)


class ContextState(Enum):
    STOPPED = "stopped"
    RUNNING = "running"
    HALTED = "halted"


@dataclass(frozen=True)
class ContextOptions:
    max_jumps_per_tick: int = 5

    def __post_init__(self):
        if self.max_jumps_per_tick < 0:
            raise ValueError("max_jumps_per_tick must be >= 0.")


class ScriptContext:
    """Execution state of one actor running a shared :class:`Script`.

    The context binds itself to ``owner.script_context`` so commands can reach
    their heap, labels and scroll buffer through the owner they run against.

    ``command_index`` is ``-1`` once stopped (terminal), inside the command
    list while running, and past its end once the script ran out of commands.
    A halted context still reacts to messages that name a label; a stopped one
    never runs again.
    """

    def __init__(
        self,
        script: Script,
        owner: "ScriptOwner",
        options: Optional[ContextOptions] = None,
    ):
        self.script = script
        self.owner = owner
        self.options = options or ContextOptions()
        self.command_index = 0 if script.executable else -1
        self.label_cursors: Dict[str, int] = {name: 0 for name in script.label_indices}
        self.stored_command: Optional[Command] = None
        self.message_inbox: Deque[str] = deque()
        self.heap: Dict[str, Any] = {}
        self.locked = False
        self.scroll_content: List[ScrollLine] = []
        self._jump_count = 0
        owner.script_context = self

    @property
    def state(self) -> ContextState:
        if self.command_index < 0:
            return ContextState.STOPPED
        if self.command_index < len(self.script.commands):
            return ContextState.RUNNING
        return ContextState.HALTED

    def is_running(self) -> bool:
        return self.state is ContextState.RUNNING

    def stop(self) -> None:
        logger.debug("Script '%s' stopped at command %d.", self.script.name, self.command_index)
        self.command_index = -1
        self.stored_command = None
        self.heap.clear()

    # Messages and labels

    def send_message(self, message: str) -> None:
        """Queue ``message``; it is handled at the start of a later tick."""
        self.message_inbox.append(message.upper())

    def jump_to_label(self, name: str) -> bool:
        """Resume at the command after the current occurrence of ``name``.

        Unknown, fully zapped labels and stopped contexts make this a no-op
        that returns ``False``.
        """
        name = name.upper()
        if self.state is ContextState.STOPPED:
            return False
        indices = self.script.label_indices.get(name)
        if not indices:
            return False
        cursor = self.label_cursors[name]
        if cursor >= len(indices):
            return False

        self.heap.clear()
        self.stored_command = None
        self.command_index = indices[cursor] + 1
        self._jump_count += 1
        logger.debug(
            "Script '%s' jumped to label '%s' (command %d).",
            self.script.name,
            name,
            self.command_index,
        )
        return True

    def zap_label(self, name: str) -> None:
        name = name.upper()
        if name in self.label_cursors:
            limit = len(self.script.label_indices[name])
            self.label_cursors[name] = min(self.label_cursors[name] + 1, limit)

    def restore_label(self, name: str) -> None:
        name = name.upper()
        if name in self.label_cursors:
            self.label_cursors[name] = max(self.label_cursors[name] - 1, 0)

    # Heap of the command currently executing

    def _heap_key(self, key: str) -> str:
        return f"{self.command_index}{key}"

    def recall(self, key: str, default: Any = None) -> Any:
        return self.heap.get(self._heap_key(key), default)

    def remember(self, key: str, value: Any) -> None:
        self.heap[self._heap_key(key)] = value

    def forget(self, key: str) -> None:
        self.heap.pop(self._heap_key(key), None)

    # Scroll

    def add_scroll_line(self, line: ScrollLine) -> None:
        self.scroll_content.append(line)

    def _flush_scroll(self) -> None:
        lines = tuple(self.scroll_content)
        self.scroll_content.clear()
        self.owner.display_scroll(lines)

    # Execution

    def execute_tick(self) -> None:
        """Run one tick: handle one queued message, then execute commands.

        Commands returning CONTINUE chain within the tick. Jump chains stop
        once ``options.max_jumps_per_tick`` is exceeded and resume next tick.
        """
        self._jump_count = 0

        if self.message_inbox:
            message = self.message_inbox.popleft()
            if self.locked:
                logger.debug("Script '%s' is locked; ignored message '%s'.", self.script.name, message)
            elif not self.jump_to_label(message):
                logger.debug("Script '%s' discarded message '%s'.", self.script.name, message)

        while self.is_running():
            command = self.stored_command or self.script.get_command(self.command_index)
            result = command.execute(self.owner)

            if self.scroll_content and not command.modifies_scroll:
                self._flush_scroll()

            if result is None or result is CommandResult.NORMAL:
                self._advance()
                break
            if result is CommandResult.CONTINUE:
                self._advance()
                continue
            if result is CommandResult.CONTINUE_AFTER_JUMP:
                if self._jump_count > self.options.max_jumps_per_tick:
                    logger.debug(
                        "Script '%s' exhausted its jump budget for this tick.", self.script.name
                    )
                    break
                continue
            if result is CommandResult.REPEAT:
                self.stored_command = command
                break
            raise ScriptRuntimeFault(
                f"Command {type(command).__name__} returned unexpected result {result!r}."
            )

        if self.scroll_content:
            self._flush_scroll()

    def _advance(self) -> None:
        self.stored_command = None
        if not self.is_running():
            return
        prefix = str(self.command_index)
        for key in [key for key in self.heap if key.startswith(prefix + "<")]:
            del self.heap[key]
        self.command_index += 1

    # Persistence

    def serialize(self) -> Dict[str, Any]:
        return {
            "commandIndex": self.command_index,
            "currentLabels": {
                name: cursor for name, cursor in self.label_cursors.items() if cursor
            },
            "heap": dict(self.heap),
            "locked": self.locked,
        }

    def deserialize(self, data: Mapping[str, Any]) -> None:
        """Restore state written by :meth:`serialize` for the same script."""
        if self.script.executable:
            self.command_index = int(data.get("commandIndex", 0))
        self.heap = dict(data.get("heap", {}))
        self.locked = bool(data.get("locked", False))
        self.stored_command = None
        for name, cursor in data.get("currentLabels", {}).items():
            if name in self.label_cursors:
                self.label_cursors[name] = int(cursor)

    def __repr__(self) -> str:
        return (
            f"ScriptContext(script={self.script.name!r}, "
            f"command_index={self.command_index}, state={self.state.value})"
        )
