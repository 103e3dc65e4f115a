import contextvars
from contextlib import contextmanager
from typing import Iterator, Optional


_CURRENT_SCRIPT_LINE: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar(
    "jztscript_current_script_line", default=None
)


def _format_with_context(
    message: str,
    *,
    line: Optional[int] = None,
    column: Optional[int] = None,
    code: Optional[str] = None,
) -> str:
    if line is None:
        return message

    details = [f"Location: line {line}, column {column if column else 1}"]
    if code:
        details.append(f"Code: {code.strip()}")
    return f"{message}\n" + "\n".join(details)


@contextmanager
def script_source_context(line_text: str) -> Iterator[None]:
    """Attach ``line_text`` as the ``Code:`` snippet of syntax errors raised inside."""
    token = _CURRENT_SCRIPT_LINE.set(line_text)
    try:
        yield
    finally:
        _CURRENT_SCRIPT_LINE.reset(token)


class ScriptError(Exception):
    """Base JZTScript error."""


class ScriptSyntaxError(ScriptError):
    """Raised when script text cannot be turned into commands.

    ``reason`` keeps the bare message; ``str(error)`` adds location details.
    """

    def __init__(
        self,
        message: str,
        *,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ):
        self.reason = message
        self.line = line
        self.column = column
        self.code = _CURRENT_SCRIPT_LINE.get()
        super().__init__(
            _format_with_context(message, line=line, column=column, code=self.code)
        )


class LexError(ScriptSyntaxError):
    """Raised on an unrecognized character or an unterminated string."""


class ParseError(ScriptSyntaxError):
    """Raised when a token stream does not match the command grammar."""


class ScriptRuntimeFault(ScriptError):
    """Raised when a command hands the interpreter a result it does not know.

    This is an implementation bug in a command, never a script author error.
    """


class ScriptSyntaxWarning(UserWarning):
    """Category used when a script diagnostic has no explicit receiver."""
