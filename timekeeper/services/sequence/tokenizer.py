"""Lexer for sequence patterns such as "(25m work, 5m rest)x4, 30m break" """
import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

logger = logging.getLogger(__name__)


class TokenKind(str, Enum):
    LPAREN = "LPAREN"
    RPAREN = "RPAREN"
    COMMA = "COMMA"
    MULT = "MULT"
    LABEL = "LABEL"
    DURATION = "DURATION"


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str = ""
    value: Optional[int] = None  # repeat count for MULT


QUOTES = ("'", '"')
DIGITS = set("0123456789")
DURATION_CHARS = DIGITS | set("hms")


def _is_label_char(char: str) -> bool:
    return (char.isascii() and char.isalnum()) or char in "_-"


def tokenize(pattern: str) -> List[Token]:
    """
    Split a sequence pattern into tokens.

    Purely lexical: balance and ordering are left to the parser. Whitespace
    outside quotes is dropped and unrecognised characters are skipped.
    Quoted labels are taken verbatim up to the matching quote; an
    unterminated quote runs to the end of the input.

    Args:
        pattern: Raw sequence pattern

    Returns:
        Tokens in input order
    """
    tokens: List[Token] = []
    if not pattern:
        return tokens

    i = 0
    length = len(pattern)
    while i < length:
        char = pattern[i]

        if char.isspace():
            i += 1
        elif char == "(":
            tokens.append(Token(TokenKind.LPAREN, char))
            i += 1
        elif char == ")":
            tokens.append(Token(TokenKind.RPAREN, char))
            i += 1
        elif char == ",":
            tokens.append(Token(TokenKind.COMMA, char))
            i += 1
        elif char == "x" and i + 1 < length and pattern[i + 1] in DIGITS:
            end = i + 1
            while end < length and pattern[end] in DIGITS:
                end += 1
            digits = pattern[i + 1:end]
            tokens.append(Token(TokenKind.MULT, pattern[i:end], int(digits)))
            i = end
        elif char in QUOTES:
            close = pattern.find(char, i + 1)
            if close == -1:
                close = length
            tokens.append(Token(TokenKind.LABEL, pattern[i + 1:close]))
            i = close + 1
        elif char in DIGITS:
            end = i
            while end < length and pattern[end] in DURATION_CHARS:
                end += 1
            tokens.append(Token(TokenKind.DURATION, pattern[i:end]))
            i = end
        elif _is_label_char(char):
            end = i
            while end < length and _is_label_char(pattern[end]):
                end += 1
            tokens.append(Token(TokenKind.LABEL, pattern[i:end]))
            i = end
        else:
            logger.debug(f"Skipping unrecognised character {char!r} at {i}")
            i += 1

    return tokens
