"""Public Python API for JZTScript.

The package exposes the script pipeline (lexer, grammar, scripts) and the
per-actor interpreter. Actors plug in by implementing
:class:`jztscript.owner.ScriptOwner`.
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

from jztscript.context import ContextOptions, ContextState, ScriptContext
from jztscript.directions import Direction
from jztscript.errors import (
    LexError,
    ParseError,
    ScriptError,
    ScriptRuntimeFault,
    ScriptSyntaxError,
    ScriptSyntaxWarning,
)
from jztscript.grammar import ScriptGrammar
from jztscript.ir import CommandResult, ThingTemplate
from jztscript.lexer import Lexer, Token, TokenKind, tokenize
from jztscript.owner import ScriptOwner
from jztscript.script import Script, ScriptDiagnostic
from jztscript.script_registry import ScriptRegistry

try:
    __version__: str = version("jztscript")
except PackageNotFoundError:  # pragma: no cover - editable local fallback
    __version__ = "0.1.0"


def about(*, print_output: bool = True) -> str:
    """Return and optionally print the interpreter execution contract.

    Args:
        print_output: Whether to print the returned summary.

    Returns:
        Human-readable summary string.

    Example:
        >>> from jztscript import about
        >>> text = about(print_output=False)
        >>> "Tick" in text
        True
    """
    text = (
        f"JZTScript {__version__}\n"
        "Source: one statement per line; ':name' declares a label; '//' starts a comment.\n"
        "Case: keywords, labels, messages and counters are case-insensitive.\n"
        "Tick: one queued message is handled, then commands run until one consumes the tick.\n"
        "Results: NORMAL ends the tick, CONTINUE chains, REPEAT retries next tick.\n"
        "Labels: a jump resumes after the label line; ZAP/RESTORE move a per-actor cursor.\n"
        "Failure: a script with a syntax error never runs; other scripts are unaffected."
    )
    if print_output:
        print(text)
    return text


__all__ = [
    "__version__",
    "about",
    "CommandResult",
    "ContextOptions",
    "ContextState",
    "Direction",
    "LexError",
    "Lexer",
    "ParseError",
    "Script",
    "ScriptContext",
    "ScriptDiagnostic",
    "ScriptError",
    "ScriptGrammar",
    "ScriptOwner",
    "ScriptRegistry",
    "ScriptRuntimeFault",
    "ScriptSyntaxError",
    "ScriptSyntaxWarning",
    "ThingTemplate",
    "Token",
    "TokenKind",
    "tokenize",
]
