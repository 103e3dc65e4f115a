"""Parser-combinator engine.

Every parser maps a list of candidate :class:`Assembly` values to the list of
candidates advanced by a successful match. A candidate that cannot match is
simply absent from the output; ambiguity is resolved afterwards by
:meth:`Parser.best_match`, which keeps the candidate that consumed the most
tokens.

Parser nodes are immutable and can be shared between concurrent parses. The
only state a match touches is the assemblies it clones.
"""

from __future__ import annotations

import dataclasses
import re
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Sequence as SequenceType, Tuple

from jztscript.errors import ParseError
from jztscript.lexer import Token, TokenKind


@dataclass
class Assembly:
    """A cursor over a token sequence plus a working output stack."""

    tokens: Tuple[Token, ...]
    index: int = 0
    stack: List[Any] = field(default_factory=list)

    def __post_init__(self):
        self.tokens = tuple(self.tokens)
        if not 0 <= self.index <= len(self.tokens):
            raise ValueError("Assembly index out of range.")

    def clone(self) -> "Assembly":
        return Assembly(self.tokens, self.index, list(self.stack))

    def current(self) -> Optional[Token]:
        if self.index >= len(self.tokens):
            return None
        return self.tokens[self.index]

    def next(self) -> Token:
        token = self.tokens[self.index]
        self.index += 1
        return token

    def is_done(self) -> bool:
        return self.index >= len(self.tokens)

    def peek(self) -> Any:
        return self.stack[-1] if self.stack else None

    def pop(self) -> Any:
        return self.stack.pop()

    def push(self, item: Any) -> None:
        self.stack.append(item)


Assembler = Callable[[Assembly], None]


def _unexpected_token_error(assembly: Assembly) -> ParseError:
    token = assembly.current()
    if token is None:
        last = assembly.tokens[-1] if assembly.tokens else None
        return ParseError(
            "Token expected",
            line=last.line if last is not None else None,
            column=last.column if last is not None else None,
        )
    return ParseError(
        f"Unexpected token '{token.text}'", line=token.line, column=token.column
    )


def find_best_assembly(assemblies: SequenceType[Assembly]) -> Optional[Assembly]:
    """Return the most advanced assembly; ties keep the first one seen."""
    best: Optional[Assembly] = None
    for assembly in assemblies:
        if best is None or assembly.index > best.index:
            best = assembly
    return best


@dataclass(frozen=True, eq=False)
class Parser:
    assembler: Optional[Assembler] = field(default=None, kw_only=True)

    def match(self, assemblies: List[Assembly]) -> List[Assembly]:
        return []

    def match_and_assemble(self, assemblies: List[Assembly]) -> List[Assembly]:
        result = self.match(assemblies)
        if self.assembler is not None:
            for assembly in result:
                self.assembler(assembly)
        return result

    def best_match(self, assembly: Assembly) -> Optional[Assembly]:
        return find_best_assembly(self.match_and_assemble([assembly]))

    def complete_match(self, assembly: Assembly) -> Assembly:
        """Match ``assembly`` and require the winner to consume every token."""
        result = self.best_match(assembly)
        if result is not None and result.is_done():
            return result
        raise _unexpected_token_error(result if result is not None else assembly)


def _clone_all(assemblies: List[Assembly]) -> List[Assembly]:
    return [assembly.clone() for assembly in assemblies]


@dataclass(frozen=True, eq=False)
class Empty(Parser):
    """Matches without consuming anything."""

    def match(self, assemblies: List[Assembly]) -> List[Assembly]:
        return _clone_all(assemblies)


@dataclass(frozen=True, eq=False)
class EndOfInput(Parser):
    """Matches only an assembly with no tokens left."""

    def match(self, assemblies: List[Assembly]) -> List[Assembly]:
        return [assembly.clone() for assembly in assemblies if assembly.is_done()]


@dataclass(frozen=True, eq=False)
class Repetition(Parser):
    """Zero or more applications of ``parser``.

    Every intermediate outcome (0, 1, ... N matches) is kept as a candidate.
    """

    parser: Parser

    def match(self, assemblies: List[Assembly]) -> List[Assembly]:
        result = _clone_all(assemblies)
        # A useful round consumes at least one token.
        rounds = max((len(a.tokens) - a.index for a in assemblies), default=0)
        for _ in range(rounds):
            assemblies = self.parser.match_and_assemble(assemblies)
            if not assemblies:
                break
            result.extend(assemblies)
        return result


@dataclass(frozen=True, eq=False)
class Sequence(Parser):
    parsers: Tuple[Parser, ...]

    def __post_init__(self):
        object.__setattr__(self, "parsers", tuple(self.parsers))
        if not self.parsers:
            raise ValueError("Sequence requires at least one sub-parser.")

    def match(self, assemblies: List[Assembly]) -> List[Assembly]:
        started = False
        previous = assemblies
        result = assemblies
        for parser in self.parsers:
            result = parser.match_and_assemble(result)
            if not result:
                if started:
                    raise _unexpected_token_error(find_best_assembly(previous))
                return result
            started = True
            previous = result
        return result


@dataclass(frozen=True, eq=False)
class Alternation(Parser):
    """Union of every branch's successful outcomes.

    A hard error from one branch is only reported when no branch succeeds.
    """

    parsers: Tuple[Parser, ...]

    def __post_init__(self):
        object.__setattr__(self, "parsers", tuple(self.parsers))

    def match(self, assemblies: List[Assembly]) -> List[Assembly]:
        result: List[Assembly] = []
        error: Optional[ParseError] = None
        for parser in self.parsers:
            try:
                result.extend(parser.match_and_assemble(assemblies))
            except ParseError as exc:
                error = exc
        if not result and error is not None:
            raise error
        return result


@dataclass(frozen=True, eq=False)
class Lazy(Parser):
    """Defers to the parser returned by ``factory``; used for recursive rules."""

    factory: Callable[[], Parser]

    def match(self, assemblies: List[Assembly]) -> List[Assembly]:
        return self.factory().match_and_assemble(assemblies)


@dataclass(frozen=True, eq=False)
class Terminal(Parser):
    discard: bool = field(default=False, kw_only=True)

    def qualifies(self, token: Token) -> bool:
        return True

    def match(self, assemblies: List[Assembly]) -> List[Assembly]:
        result: List[Assembly] = []
        for assembly in assemblies:
            token = assembly.current()
            if token is None or not self.qualifies(token):
                continue
            advanced = assembly.clone()
            advanced.next()
            if not self.discard:
                advanced.push(token)
            result.append(advanced)
        return result


@dataclass(frozen=True, eq=False)
class Literal(Terminal):
    value: str
    case_sensitive: bool = False

    def qualifies(self, token: Token) -> bool:
        if token.kind not in (TokenKind.WORD, TokenKind.OPERATOR, TokenKind.PUNCTUATION):
            return False
        if self.case_sensitive:
            return token.value == self.value
        return str(token.value).upper() == self.value.upper()


_WORD_PATTERN = re.compile(r"^[^\d\s]\w*$")


@dataclass(frozen=True, eq=False)
class Word(Terminal):
    def qualifies(self, token: Token) -> bool:
        return token.kind == TokenKind.WORD and bool(_WORD_PATTERN.match(str(token.value)))


@dataclass(frozen=True, eq=False)
class Number(Terminal):
    def qualifies(self, token: Token) -> bool:
        return token.kind == TokenKind.NUMBER and isinstance(token.value, int)


@dataclass(frozen=True, eq=False)
class String(Terminal):
    def qualifies(self, token: Token) -> bool:
        return token.kind == TokenKind.STRING


@dataclass(frozen=True, eq=False)
class NewLine(Terminal):
    def qualifies(self, token: Token) -> bool:
        return token.kind == TokenKind.NEWLINE


def discard(terminal: Terminal) -> Terminal:
    """Copy of ``terminal`` that consumes its token without pushing it."""
    return dataclasses.replace(terminal, discard=True)


def optional(parser: Parser) -> Alternation:
    return Alternation((parser, Empty()))


def choice(*parsers: Parser, assembler: Optional[Assembler] = None) -> Alternation:
    return Alternation(parsers, assembler=assembler)
