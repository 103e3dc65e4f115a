from typing import Tuple

from jztscript.directions import DIRECTION_MODIFIERS, DIRECTION_TERMINALS

FORCEFUL_MOVE_KEYWORDS: Tuple[str, ...] = ("MOVE", "GO")
GENTLE_MOVE_KEYWORDS: Tuple[str, ...] = ("TRY",)

COMMAND_KEYWORDS = frozenset(
    {
        "BECOME",
        "CHANGE",
        "CHAR",
        "DIE",
        "END",
        "GIVE",
        "IF",
        "LOCK",
        "PLAY",
        "PUT",
        "RESTORE",
        "SAY",
        "SCROLL",
        "SEND",
        "SET",
        "SHOOT",
        "STAND",
        "TAKE",
        "THROWSTAR",
        "TORCH",
        "UNLOCK",
        "VICTORY",
        "WAIT",
        "WALK",
        "ZAP",
        *FORCEFUL_MOVE_KEYWORDS,
        *GENTLE_MOVE_KEYWORDS,
    }
)

LABEL_MARKER = ":"

# Longer operators first; the lexer already joins "<=" and ">=".
COMPARISON_OPERATORS: Tuple[str, ...] = (">=", "<=", ">", "<", "=")

COLOR_NAMES: Tuple[str, ...] = (
    "Black",
    "Blue",
    "Green",
    "Cyan",
    "Red",
    "Magenta",
    "Brown",
    "White",
    "Grey",
    "BrightBlue",
    "BrightGreen",
    "BrightCyan",
    "BrightRed",
    "BrightMagenta",
    "Yellow",
    "BrightWhite",
)

THING_NAMES: Tuple[str, ...] = (
    "Empty",
    "ActiveBomb",
    "Ammo",
    "Bear",
    "Blinker",
    "BlinkWall",
    "Bomb",
    "Boulder",
    "BreakableWall",
    "Bullet",
    "Centipede",
    "Conveyor",
    "Door",
    "Duplicator",
    "Explosion",
    "FakeWall",
    "Forest",
    "Gem",
    "Heart",
    "InvisibleWall",
    "Key",
    "Lava",
    "LineWall",
    "Lion",
    "Passage",
    "Player",
    "Pusher",
    "Ricochet",
    "River",
    "Ruffian",
    "Signpost",
    "SliderEw",
    "SliderNs",
    "Snake",
    "SolidWall",
    "Spider",
    "SpiderWeb",
    "SpinningGun",
    "Teleporter",
    "Text",
    "ThrowingStar",
    "Tiger",
    "Torch",
    "Wall",
    "Water",
)

DIRECTION_TERMINAL_KEYWORDS: Tuple[str, ...] = tuple(DIRECTION_TERMINALS)
DIRECTION_MODIFIER_KEYWORDS: Tuple[str, ...] = tuple(DIRECTION_MODIFIERS)

__all__ = [
    "FORCEFUL_MOVE_KEYWORDS",
    "GENTLE_MOVE_KEYWORDS",
    "COMMAND_KEYWORDS",
    "LABEL_MARKER",
    "COMPARISON_OPERATORS",
    "COLOR_NAMES",
    "THING_NAMES",
    "DIRECTION_TERMINAL_KEYWORDS",
    "DIRECTION_MODIFIER_KEYWORDS",
]
