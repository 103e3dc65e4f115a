from __future__ import annotations

import textwrap
from typing import Dict, List, Optional, Set, Tuple

import pytest

from jztscript.context import ContextOptions, ScriptContext
from jztscript.directions import Direction
from jztscript.script import Script


class FakeOwner:
    """Recording stand-in for a board actor."""

    def __init__(self):
        self.script_context: Optional[ScriptContext] = None
        self.orientation: Optional[Direction] = None
        self.position: Tuple[int, int] = (0, 0)
        self.blocked: Set[Direction] = set()
        self.player: Optional[Direction] = None
        self.smart: Optional[Direction] = None
        self.adjacent = False
        self.aligned = False
        self.visible_radius: Optional[int] = None
        self.tiles: Dict[Tuple[str, Optional[str]], int] = {}
        self.counters: Dict[str, int] = {}
        self.calls: List[tuple] = []
        self.moves: List[Direction] = []
        self.sent: List[Tuple[str, str]] = []
        self.said: List[str] = []
        self.scrolls: List[tuple] = []

    def move(self, direction: Direction) -> bool:
        if direction in self.blocked:
            return False
        self.moves.append(direction)
        x, y = self.position
        self.position = (x + direction.dx, y + direction.dy)
        self.orientation = direction
        return True

    def is_blocked(self, direction: Optional[Direction]) -> bool:
        return direction in self.blocked

    def get_free_directions(self) -> List[Direction]:
        return [direction for direction in Direction if direction not in self.blocked]

    def get_blocked_directions(self) -> List[Direction]:
        return [direction for direction in Direction if direction in self.blocked]

    def player_direction(self) -> Optional[Direction]:
        return self.player

    def smart_direction(self) -> Optional[Direction]:
        return self.smart

    def is_player_adjacent(self) -> bool:
        return self.adjacent

    def is_player_aligned(self, direction: Optional[Direction] = None) -> bool:
        if direction is None:
            return self.aligned
        return self.aligned and direction == self.player

    def is_player_visible(self, radius: int) -> bool:
        return self.visible_radius is not None and self.visible_radius <= radius

    def has_tile(self, template, count: int) -> bool:
        return self.tiles.get((template.type, template.color), 0) >= count

    def get_counter_value(self, name: str) -> int:
        return self.counters.get(name, 0)

    def adjust_counter(self, name: str, delta: int) -> None:
        self.counters[name] = self.counters.get(name, 0) + delta

    def set_counter_value(self, name: str, value: int) -> None:
        self.counters[name] = value

    def send_message(self, recipient: str, message: str) -> None:
        self.sent.append((recipient, message))

    def remove(self) -> None:
        self.calls.append(("remove",))

    def replace(self, template) -> None:
        self.calls.append(("replace", template))

    def change_tiles(self, from_template, to_template) -> None:
        self.calls.append(("change", from_template, to_template))

    def put(self, direction: Direction, template) -> None:
        self.calls.append(("put", direction, template))

    def shoot(self, direction: Direction, star: bool) -> None:
        self.calls.append(("shoot", direction, star))

    def push_player(self, direction: Optional[Direction]) -> None:
        self.calls.append(("push_player", direction))

    def play(self, notation: str, exclusive: bool) -> None:
        self.calls.append(("play", notation, exclusive))

    def say(self, text: str) -> None:
        self.said.append(text)

    def display_scroll(self, lines) -> None:
        self.scrolls.append(tuple(lines))

    def set_torch_radius(self, radius: int) -> None:
        self.calls.append(("torch", radius))

    def set_character(self, code: int) -> None:
        self.calls.append(("char", code))

    def set_walk_direction(self, direction: Optional[Direction]) -> None:
        self.calls.append(("walk", direction))

    def victory(self) -> None:
        self.calls.append(("victory",))


@pytest.fixture
def owner() -> FakeOwner:
    return FakeOwner()


@pytest.fixture
def run_script(owner):
    """Build a context for ``source`` bound to the ``owner`` fixture."""

    def build(source: str, *, options: Optional[ContextOptions] = None) -> ScriptContext:
        script = Script("test", textwrap.dedent(source).strip("\n"))
        return ScriptContext(script, owner, options)

    return build
