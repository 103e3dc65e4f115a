from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Union

from jztscript.errors import LexError


class TokenKind(Enum):
    WORD = "word"
    NUMBER = "number"
    STRING = "string"
    OPERATOR = "operator"
    PUNCTUATION = "punctuation"
    NEWLINE = "newline"
    COMMENT = "comment"


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    value: Union[str, int]
    line: int
    column: int
    position: int

    @property
    def text(self) -> str:
        """Token value as it would be quoted in a diagnostic."""
        if self.kind == TokenKind.NEWLINE:
            return "[New Line]"
        return str(self.value)


OPERATOR_CHARS = {"<", ">", "=", ":"}
PUNCTUATION_CHARS = {","}

_STRING_ESCAPES = {'"': '"', "n": "\n"}


def _is_alpha(ch: str) -> bool:
    return ("a" <= ch <= "z") or ("A" <= ch <= "Z") or ch == "_"


def _is_digit(ch: str) -> bool:
    return "0" <= ch <= "9"


class Lexer:
    """Single left-to-right scanner producing :class:`Token` values.

    Line and column numbers are 1-based. ``line`` lets a caller lexing one line
    of a larger script keep diagnostics aligned with the full text.
    """

    def __init__(self, text: str, *, skip_comments: bool = True, line: int = 1) -> None:
        self.text = text
        self.skip_comments = skip_comments
        self.index = 0
        self.line = line
        self.column = 1

    def tokenize(self) -> List[Token]:
        tokens: List[Token] = []
        text = self.text
        n = len(text)

        while self.index < n:
            ch = text[self.index]
            if ch in " \t\r":
                self._advance(1)
                continue
            if ch == "\n":
                tokens.append(self._token(TokenKind.NEWLINE, "\n"))
                self.index += 1
                self.line += 1
                self.column = 1
                continue
            if ch == "/" and self._peek(1) == "/":
                comment = self._consume_comment()
                if not self.skip_comments:
                    tokens.append(comment)
                continue
            if ch == '"':
                tokens.append(self._consume_string())
                continue
            if ch in OPERATOR_CHARS:
                if ch != "=" and self._peek(1) == "=":
                    tokens.append(self._token(TokenKind.OPERATOR, ch + "="))
                    self._advance(2)
                else:
                    tokens.append(self._token(TokenKind.OPERATOR, ch))
                    self._advance(1)
                continue
            if ch in PUNCTUATION_CHARS:
                tokens.append(self._token(TokenKind.PUNCTUATION, ch))
                self._advance(1)
                continue
            if _is_digit(ch):
                tokens.append(self._consume_number())
                continue
            if _is_alpha(ch):
                tokens.append(self._consume_word())
                continue
            raise LexError("Unrecognized token", line=self.line, column=self.column)

        return tokens

    def _consume_comment(self) -> Token:
        end = self.index + 2
        while end < len(self.text) and self.text[end] not in "\r\n":
            end += 1
        token = self._token(TokenKind.COMMENT, self.text[self.index + 2 : end])
        self._advance(end - self.index)
        return token

    def _consume_string(self) -> Token:
        text = self.text
        n = len(text)
        chars: List[str] = []
        end = self.index + 1
        while end < n:
            ch = text[end]
            if ch == "\\" and end + 1 < n and text[end + 1] in _STRING_ESCAPES:
                chars.append(_STRING_ESCAPES[text[end + 1]])
                end += 2
                continue
            if ch == '"':
                token = self._token(TokenKind.STRING, "".join(chars))
                self._advance(end + 1 - self.index)
                return token
            if ch in "\r\n":
                break
            chars.append(ch)
            end += 1
        raise LexError("Unterminated string literal", line=self.line, column=self.column)

    def _consume_number(self) -> Token:
        end = self.index
        while end < len(self.text) and _is_digit(self.text[end]):
            end += 1
        token = self._token(TokenKind.NUMBER, int(self.text[self.index : end]))
        self._advance(end - self.index)
        return token

    def _consume_word(self) -> Token:
        end = self.index
        while end < len(self.text) and (
            _is_alpha(self.text[end]) or _is_digit(self.text[end])
        ):
            end += 1
        token = self._token(TokenKind.WORD, self.text[self.index : end])
        self._advance(end - self.index)
        return token

    def _token(self, kind: TokenKind, value: Union[str, int]) -> Token:
        return Token(kind, value, self.line, self.column, self.index)

    def _peek(self, offset: int) -> str:
        position = self.index + offset
        if position >= len(self.text):
            return ""
        return self.text[position]

    def _advance(self, count: int) -> None:
        self.index += count
        self.column += count


def tokenize(text: str, *, skip_comments: bool = True, line: int = 1) -> List[Token]:
    """Tokenize ``text`` into a flat token list."""
    return Lexer(text, skip_comments=skip_comments, line=line).tokenize()
