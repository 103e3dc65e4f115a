from typing import Any, List, Optional, Tuple

from jztscript.lexer import Token, TokenKind
from jztscript.parser import Assembly


def _is_token(item: Any, kind: TokenKind, value: Optional[str] = None) -> bool:
    if not isinstance(item, Token) or item.kind != kind:
        return False
    if value is None:
        return True
    return str(item.value).upper() == value.upper()


def _pop_until_keyword(assembly: Assembly, keyword: str) -> List[Any]:
    """Pop stack items down to the ``keyword`` word token, which is discarded.

    The earliest matching token wins, so arguments spelled like the keyword
    (``SEND send``) are returned as arguments. Items are returned in the order
    they were pushed.
    """
    for position, item in enumerate(assembly.stack):
        if _is_token(item, TokenKind.WORD, keyword):
            items = assembly.stack[position + 1 :]
            del assembly.stack[position:]
            return items
    items = list(assembly.stack)
    assembly.stack.clear()
    return items


def _pop_word(assembly: Assembly) -> str:
    return str(assembly.pop().value).upper()


def _pop_optional_number(assembly: Assembly, default: int) -> int:
    if _is_token(assembly.peek(), TokenKind.NUMBER):
        return assembly.pop().value
    return default


def _pop_optional_word(assembly: Assembly, value: Optional[str] = None) -> Optional[str]:
    if _is_token(assembly.peek(), TokenKind.WORD, value):
        return _pop_word(assembly)
    return None


def _split_counter_arguments(items: List[Token]) -> Tuple[str, Optional[int], List[str]]:
    # Accepts both "<number> <counter>" and "<counter> <number>" orders.
    number: Optional[int] = None
    words: List[str] = []
    for item in items:
        if item.kind == TokenKind.NUMBER:
            number = item.value
        else:
            words.append(str(item.value).upper())
    return words[0], number, words[1:]


__all__ = [
    "_is_token",
    "_pop_until_keyword",
    "_pop_word",
    "_pop_optional_number",
    "_pop_optional_word",
    "_split_counter_arguments",
]
