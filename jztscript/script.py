"""Parsed scripts and their label tables."""

from __future__ import annotations

import warnings
from dataclasses import dataclass
from functools import lru_cache
from types import MappingProxyType
from typing import Callable, Dict, List, Mapping, Optional, Tuple

from jztscript.commands import Command
from jztscript.errors import ScriptSyntaxError, ScriptSyntaxWarning
from jztscript.grammar import ScriptGrammar
from jztscript.ir import Label


@dataclass(frozen=True)
class ScriptDiagnostic:
    """Why a script could not be parsed."""

    script_name: str
    line_number: int
    line_text: str
    message: str

    def __str__(self) -> str:
        return (
            f"Script '{self.script_name}' failed to parse: {self.message}\n"
            f"Location: line {self.line_number}\n"
            f"Code: {self.line_text.strip()}"
        )


DiagnosticHandler = Callable[[ScriptDiagnostic], None]


@lru_cache(maxsize=1)
def default_grammar() -> ScriptGrammar:
    return ScriptGrammar()


class Script:
    """An immutable command list plus a label table, built once from raw text.

    A script is shared by every actor that runs it. When any line fails to
    lex or parse, the whole script is kept empty and non-executable, and the
    failure is reported through ``on_error`` (or a :class:`ScriptSyntaxWarning`
    when no handler is given) instead of being raised.
    """

    def __init__(
        self,
        name: str,
        raw_text: str,
        *,
        grammar: Optional[ScriptGrammar] = None,
        on_error: Optional[DiagnosticHandler] = None,
    ):
        diagnostic: Optional[ScriptDiagnostic] = None
        commands: List[Command] = []
        labels: Dict[str, List[int]] = {}
        grammar = grammar or default_grammar()

        for line_number, line_text in enumerate(raw_text.split("\n"), start=1):
            try:
                items = grammar.parse_line(line_text, line_number=line_number)
            except ScriptSyntaxError as exc:
                diagnostic = ScriptDiagnostic(name, line_number, line_text, exc.reason)
                commands, labels = [], {}
                break
            for item in items:
                if isinstance(item, Label):
                    # A label points at the command just before it.
                    labels.setdefault(item.name, []).append(len(commands) - 1)
                else:
                    commands.append(item)

        self._name = name
        self._raw_text = raw_text
        self._diagnostic = diagnostic
        self._commands: Tuple[Command, ...] = tuple(commands)
        self._label_indices: Mapping[str, Tuple[int, ...]] = MappingProxyType(
            {label: tuple(indices) for label, indices in labels.items()}
        )

        if diagnostic is not None:
            if on_error is not None:
                on_error(diagnostic)
            else:
                warnings.warn(str(diagnostic), ScriptSyntaxWarning, stacklevel=2)

    @property
    def name(self) -> str:
        return self._name

    @property
    def raw_text(self) -> str:
        return self._raw_text

    @property
    def diagnostic(self) -> Optional[ScriptDiagnostic]:
        return self._diagnostic

    @property
    def commands(self) -> Tuple[Command, ...]:
        return self._commands

    @property
    def label_indices(self) -> Mapping[str, Tuple[int, ...]]:
        return self._label_indices

    @property
    def executable(self) -> bool:
        return self._diagnostic is None

    def get_command(self, index: int) -> Optional[Command]:
        if 0 <= index < len(self.commands):
            return self.commands[index]
        return None

    def serialize(self) -> Dict[str, str]:
        return {"name": self.name, "rawScript": self.raw_text}

    @classmethod
    def deserialize(
        cls,
        data: Mapping[str, str],
        *,
        grammar: Optional[ScriptGrammar] = None,
        on_error: Optional[DiagnosticHandler] = None,
    ) -> "Script":
        return cls(data["name"], data["rawScript"], grammar=grammar, on_error=on_error)

    def __repr__(self) -> str:
        return f"Script(name={self.name!r}, commands={len(self.commands)})"
