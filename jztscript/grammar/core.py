import dataclasses
from typing import List, Union

from jztscript.commands import (
    SELF_RECIPIENT,
    BecomeCommand,
    ChangeCommand,
    CharCommand,
    Command,
    DieCommand,
    EndCommand,
    GiveCommand,
    IfCommand,
    LockCommand,
    MoveCommand,
    PlayCommand,
    PutCommand,
    RestoreCommand,
    SayCommand,
    ScrollCommand,
    SendCommand,
    SetCommand,
    ShootCommand,
    StandCommand,
    TakeCommand,
    ThrowStarCommand,
    TorchCommand,
    UnlockCommand,
    VictoryCommand,
    WaitCommand,
    WalkCommand,
    ZapCommand,
)
from jztscript.directions import DIRECTION_MODIFIERS, DIRECTION_TERMINALS, DirectionModifier
from jztscript.errors import ParseError, script_source_context
from jztscript.ir import (
    AdjacentExpression,
    AlignedExpression,
    BlockedExpression,
    DirectionExpression,
    ExistsExpression,
    Label,
    NotExpression,
    PeepExpression,
    TestingExpression,
    ThingTemplate,
)
from jztscript.lexer import Token, TokenKind, tokenize
from jztscript.parser import (
    Alternation,
    Assembly,
    EndOfInput,
    Lazy,
    Literal,
    Number,
    Parser,
    Repetition,
    Sequence,
    String,
    Word,
    choice,
    optional,
)

from .constants import (
    COLOR_NAMES,
    COMMAND_KEYWORDS,
    COMPARISON_OPERATORS,
    DIRECTION_MODIFIER_KEYWORDS,
    DIRECTION_TERMINAL_KEYWORDS,
    FORCEFUL_MOVE_KEYWORDS,
    GENTLE_MOVE_KEYWORDS,
    LABEL_MARKER,
    THING_NAMES,
)
from .helpers import (
    _is_token,
    _pop_optional_number,
    _pop_optional_word,
    _pop_until_keyword,
    _pop_word,
    _split_counter_arguments,
)

LineItem = Union[Command, Label]


def _keyword(value: str, **kwargs) -> Literal:
    return Literal(value, discard=True, **kwargs)


def _push_direction_terminal(assembly: Assembly) -> None:
    assembly.push(DIRECTION_TERMINALS[_pop_word(assembly)])


def _push_direction_modifier(assembly: Assembly) -> None:
    assembly.push(DIRECTION_MODIFIERS[_pop_word(assembly)])


def _assemble_direction(assembly: Assembly) -> None:
    terminal = assembly.pop()
    modifiers = []
    while isinstance(assembly.peek(), DirectionModifier):
        modifiers.insert(0, assembly.pop())
    assembly.push(DirectionExpression(terminal, tuple(modifiers)))


def _assemble_counted_direction(assembly: Assembly) -> None:
    count = assembly.pop().value
    assembly.push(dataclasses.replace(assembly.pop(), count=count))


def _assemble_colorful_thing(assembly: Assembly) -> None:
    thing = assembly.pop()
    color = _pop_word(assembly)
    assembly.push(dataclasses.replace(thing, color=color))


class ScriptGrammar:
    """The JZTScript line grammar built from parser combinators.

    Grammar nodes are immutable, so one instance can parse any number of lines
    and be shared between scripts.
    """

    def __init__(self):
        self.direction = self._direction_parser()
        self.counted_direction = self._counted_direction_parser()
        self.thing = self._thing_parser()
        self.expression = self._expression_parser()
        self.statement = self._statement_parser()
        self.label = Sequence(
            (_keyword(LABEL_MARKER), Word()),
            assembler=lambda a: a.push(Label(_pop_word(a))),
        )
        self.line = Alternation((self.label, self.statement, EndOfInput()))

    def parse_line(self, text: str, *, line_number: int = 1) -> List[LineItem]:
        """Parse one script line into commands and labels.

        Blank and comment-only lines yield an empty list. A move list such as
        ``MOVE N, E 2`` yields one command per direction.
        """
        with script_source_context(text):
            tokens = [
                token
                for token in tokenize(text, line=line_number)
                if token.kind != TokenKind.NEWLINE
            ]
            if tokens:
                self._check_command_keyword(tokens[0])
            result = self.line.complete_match(Assembly(tokens))
        return list(result.stack)

    def _check_command_keyword(self, token: Token) -> None:
        if token.kind != TokenKind.WORD:
            return
        if str(token.value).upper() not in COMMAND_KEYWORDS:
            raise ParseError(
                f"Unknown command '{token.value}'", line=token.line, column=token.column
            )

    # Directions and things

    def _direction_parser(self) -> Parser:
        modifier = Alternation(
            [Literal(keyword) for keyword in DIRECTION_MODIFIER_KEYWORDS],
            assembler=_push_direction_modifier,
        )
        terminal = Alternation(
            [Literal(keyword) for keyword in DIRECTION_TERMINAL_KEYWORDS],
            assembler=_push_direction_terminal,
        )
        return Sequence((Repetition(modifier), terminal), assembler=_assemble_direction)

    def _counted_direction_parser(self) -> Parser:
        counted = Sequence((self.direction, Number()), assembler=_assemble_counted_direction)
        return choice(self.direction, counted)

    def _thing_parser(self) -> Parser:
        thing = Alternation(
            [Literal(name) for name in THING_NAMES],
            assembler=lambda a: a.push(ThingTemplate(_pop_word(a))),
        )
        color = Alternation([Literal(name) for name in COLOR_NAMES])
        colorful_thing = Sequence((color, thing), assembler=_assemble_colorful_thing)
        return choice(thing, colorful_thing)

    # Boolean expressions

    def _expression_parser(self) -> Parser:
        operator = Alternation([Literal(op) for op in COMPARISON_OPERATORS])

        def assemble_peep(assembly: Assembly) -> None:
            assembly.push(PeepExpression(_pop_optional_number(assembly, 5)))

        def assemble_exists(assembly: Assembly) -> None:
            template = assembly.pop()
            assembly.push(ExistsExpression(template, _pop_optional_number(assembly, 1)))

        def assemble_aligned(assembly: Assembly) -> None:
            if isinstance(assembly.peek(), DirectionExpression):
                assembly.push(AlignedExpression(assembly.pop()))
            else:
                assembly.push(AlignedExpression())

        def assemble_testing(assembly: Assembly) -> None:
            value = assembly.pop().value
            op = str(assembly.pop().value)
            counter = _pop_word(assembly)
            assembly.push(TestingExpression(counter, op, value))

        return Alternation(
            (
                Sequence(
                    (_keyword("NOT"), Lazy(lambda: self.expression)),
                    assembler=lambda a: a.push(NotExpression(a.pop())),
                ),
                _keyword("ADJACENT", assembler=lambda a: a.push(AdjacentExpression())),
                Sequence(
                    (_keyword("BLOCKED"), self.direction),
                    assembler=lambda a: a.push(BlockedExpression(a.pop())),
                ),
                Sequence(
                    (_keyword("ALIGNED"), optional(self.direction)),
                    assembler=assemble_aligned,
                ),
                Sequence((_keyword("PEEP"), optional(Number())), assembler=assemble_peep),
                Sequence(
                    (_keyword("EXISTS"), optional(Number()), self.thing),
                    assembler=assemble_exists,
                ),
                Sequence(
                    (optional(_keyword("TESTING")), Word(), operator, Number()),
                    assembler=assemble_testing,
                ),
            )
        )

    # Statements

    def _statement_parser(self) -> Parser:
        statements: List[Parser] = []
        for keyword in FORCEFUL_MOVE_KEYWORDS:
            statements.append(self._move_parser(keyword, forceful=True))
        for keyword in GENTLE_MOVE_KEYWORDS:
            statements.append(self._move_parser(keyword, forceful=False))

        statements.extend(
            [
                Sequence(
                    (_keyword("BECOME"), self.thing),
                    assembler=lambda a: a.push(BecomeCommand(a.pop())),
                ),
                Sequence((_keyword("CHANGE"), self.thing, self.thing), assembler=self._assemble_change),
                Sequence(
                    (_keyword("CHAR"), Number()),
                    assembler=lambda a: a.push(CharCommand(a.pop().value)),
                ),
                Sequence((_keyword("DIE"), optional(Literal("MAGNETICALLY"))), assembler=self._assemble_die),
                _keyword("END", assembler=lambda a: a.push(EndCommand())),
                self._counter_parser("GIVE", self._assemble_give, amount_optional=False),
                Sequence((_keyword("IF"), self.expression, Word()), assembler=self._assemble_if),
                _keyword("LOCK", assembler=lambda a: a.push(LockCommand())),
                Sequence(
                    (_keyword("PLAY"), String()),
                    assembler=lambda a: a.push(PlayCommand(a.pop().value)),
                ),
                Sequence((_keyword("PUT"), self.direction, self.thing), assembler=self._assemble_put),
                Sequence(
                    (_keyword("RESTORE"), Word()),
                    assembler=lambda a: a.push(RestoreCommand(_pop_word(a))),
                ),
                Sequence(
                    (_keyword("SAY"), String()),
                    assembler=lambda a: a.push(SayCommand(a.pop().value)),
                ),
                Sequence(
                    (_keyword("SCROLL"), optional(Literal("BOLD")), String(), optional(Word())),
                    assembler=self._assemble_scroll,
                ),
                Sequence((Literal("SEND"), optional(Word()), Word()), assembler=self._assemble_send),
                self._counter_parser("SET", self._assemble_set, amount_optional=True),
                Sequence(
                    (_keyword("SHOOT"), self.direction),
                    assembler=lambda a: a.push(ShootCommand(a.pop())),
                ),
                _keyword("STAND", assembler=lambda a: a.push(StandCommand())),
                self._take_parser(),
                Sequence(
                    (_keyword("THROWSTAR"), self.direction),
                    assembler=lambda a: a.push(ThrowStarCommand(a.pop())),
                ),
                Sequence(
                    (_keyword("TORCH"), optional(Number())),
                    assembler=lambda a: a.push(TorchCommand(_pop_optional_number(a, 0))),
                ),
                _keyword("UNLOCK", assembler=lambda a: a.push(UnlockCommand())),
                _keyword("VICTORY", assembler=lambda a: a.push(VictoryCommand())),
                Sequence(
                    (_keyword("WAIT"), optional(Number())),
                    assembler=lambda a: a.push(WaitCommand(_pop_optional_number(a, 1))),
                ),
                Sequence(
                    (_keyword("WALK"), self.direction),
                    assembler=lambda a: a.push(WalkCommand(a.pop())),
                ),
                Sequence(
                    (_keyword("ZAP"), Word()),
                    assembler=lambda a: a.push(ZapCommand(_pop_word(a))),
                ),
            ]
        )
        return Alternation(statements)

    def _move_parser(self, keyword: str, *, forceful: bool) -> Parser:
        subsequent = Sequence((_keyword(","), self.counted_direction))

        def assemble(assembly: Assembly) -> None:
            for expression in _pop_until_keyword(assembly, keyword):
                assembly.push(MoveCommand(expression, forceful))

        return Sequence(
            (Literal(keyword), self.counted_direction, Repetition(subsequent)),
            assembler=assemble,
        )

    def _counter_parser(self, keyword: str, assembler, *, amount_optional: bool) -> Parser:
        # "<keyword> <counter> <amount>" or "<keyword> <amount> <counter>".
        amount = optional(Number()) if amount_optional else Number()
        return Alternation(
            (
                Sequence((Literal(keyword), Word(), amount), assembler=assembler),
                Sequence((Literal(keyword), amount, Word()), assembler=assembler),
            )
        )

    def _take_parser(self) -> Parser:
        return Alternation(
            (
                Sequence(
                    (Literal("TAKE"), Number(), Word(), optional(Word())),
                    assembler=self._assemble_take,
                ),
                Sequence(
                    (Literal("TAKE"), Word(), Number(), optional(Word())),
                    assembler=self._assemble_take,
                ),
            )
        )

    # Assemblers

    @staticmethod
    def _assemble_change(assembly: Assembly) -> None:
        to_template = assembly.pop()
        assembly.push(ChangeCommand(assembly.pop(), to_template))

    @staticmethod
    def _assemble_die(assembly: Assembly) -> None:
        magnetically = _pop_optional_word(assembly, "MAGNETICALLY") is not None
        assembly.push(DieCommand(magnetically))

    @staticmethod
    def _assemble_give(assembly: Assembly) -> None:
        counter, amount, _ = _split_counter_arguments(_pop_until_keyword(assembly, "GIVE"))
        assembly.push(GiveCommand(counter, amount))

    @staticmethod
    def _assemble_set(assembly: Assembly) -> None:
        counter, value, _ = _split_counter_arguments(_pop_until_keyword(assembly, "SET"))
        assembly.push(SetCommand(counter, 1 if value is None else value))

    @staticmethod
    def _assemble_take(assembly: Assembly) -> None:
        counter, amount, rest = _split_counter_arguments(_pop_until_keyword(assembly, "TAKE"))
        assembly.push(TakeCommand(counter, amount, rest[0] if rest else None))

    @staticmethod
    def _assemble_if(assembly: Assembly) -> None:
        label = _pop_word(assembly)
        assembly.push(IfCommand(assembly.pop(), label))

    @staticmethod
    def _assemble_put(assembly: Assembly) -> None:
        template = assembly.pop()
        assembly.push(PutCommand(assembly.pop(), template))

    @staticmethod
    def _assemble_scroll(assembly: Assembly) -> None:
        label = None
        if _is_token(assembly.peek(), TokenKind.WORD):
            label = _pop_word(assembly)
        text = assembly.pop().value
        bold = _pop_optional_word(assembly, "BOLD") is not None
        assembly.push(ScrollCommand(text, bold, label))

    @staticmethod
    def _assemble_send(assembly: Assembly) -> None:
        words = [str(token.value).upper() for token in _pop_until_keyword(assembly, "SEND")]
        message = words[-1]
        recipient = words[0] if len(words) > 1 else SELF_RECIPIENT
        assembly.push(SendCommand(recipient, message))
