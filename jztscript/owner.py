"""Capabilities a script owner (the actor running a script) must provide.

Board, audio, rendering and input live outside this package; commands and
expressions reach them only through this interface. Board queries return
sentinels (``False``, ``None``, empty lists) instead of raising.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional, Protocol, Sequence

from jztscript.directions import Direction

if TYPE_CHECKING:
    from jztscript.context import ScriptContext
    from jztscript.ir import ScrollLine, ThingTemplate


class ScriptOwner(Protocol):
    script_context: "ScriptContext"
    orientation: Optional[Direction]

    # Movement and board queries
    def move(self, direction: Direction) -> bool: ...

    def is_blocked(self, direction: Optional[Direction]) -> bool: ...

    def get_free_directions(self) -> List[Direction]: ...

    def get_blocked_directions(self) -> List[Direction]: ...

    def player_direction(self) -> Optional[Direction]: ...

    def smart_direction(self) -> Optional[Direction]: ...

    def is_player_adjacent(self) -> bool: ...

    def is_player_aligned(self, direction: Optional[Direction] = None) -> bool: ...

    def is_player_visible(self, radius: int) -> bool: ...

    def has_tile(self, template: "ThingTemplate", count: int) -> bool: ...

    # Counters
    def get_counter_value(self, name: str) -> int: ...

    def adjust_counter(self, name: str, delta: int) -> None: ...

    def set_counter_value(self, name: str, value: int) -> None: ...

    # Messaging
    def send_message(self, recipient: str, message: str) -> None: ...

    # Board mutation
    def remove(self) -> None: ...

    def replace(self, template: "ThingTemplate") -> None: ...

    def change_tiles(self, from_template: "ThingTemplate", to_template: "ThingTemplate") -> None: ...

    def put(self, direction: Direction, template: "ThingTemplate") -> None: ...

    def shoot(self, direction: Direction, star: bool) -> None: ...

    def push_player(self, direction: Optional[Direction]) -> None: ...

    # Presentation and actor state
    def play(self, notation: str, exclusive: bool) -> None: ...

    def say(self, text: str) -> None: ...

    def display_scroll(self, lines: Sequence["ScrollLine"]) -> None: ...

    def set_torch_radius(self, radius: int) -> None: ...

    def set_character(self, code: int) -> None: ...

    def set_walk_direction(self, direction: Optional[Direction]) -> None: ...

    def victory(self) -> None: ...
