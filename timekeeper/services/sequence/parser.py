"""Recursive descent parser for sequence patterns

Grammar:
    sequence := item (','? item)*
    item     := group | phase
    group    := '(' sequence ')' MULT?
    phase    := DURATION LABEL?

Parsing is lenient. Stray tokens are dropped, a missing ')' is closed at end
of input, and an unmatched ')' ends the current level.
"""
import logging
from typing import List, Optional, Sequence

from timekeeper.models.sequence import AstNode, DEFAULT_PHASE_LABEL, GroupNode, PhaseNode
from .duration_parser import parse_duration
from .tokenizer import Token, TokenKind, tokenize

logger = logging.getLogger(__name__)


class SequenceParser:
    """Parser over a token list, carrying its own cursor"""

    def __init__(self, tokens: Sequence[Token]):
        self._tokens = list(tokens)
        self._pos = 0

    def parse(self) -> List[AstNode]:
        """Parse the whole token list into top-level nodes"""
        nodes: List[AstNode] = []
        while not self._at_end():
            nodes.extend(self._parse_sequence())
            if self._check(TokenKind.RPAREN):
                logger.debug(f"Ignoring unmatched ')' at token {self._pos}")
                self._advance()
        return nodes

    def _parse_sequence(self) -> List[AstNode]:
        nodes: List[AstNode] = []
        while not self._at_end():
            token = self._peek()
            if token.kind == TokenKind.RPAREN:
                break
            if token.kind == TokenKind.LPAREN:
                nodes.append(self._parse_group())
            elif token.kind == TokenKind.DURATION:
                nodes.append(self._parse_phase())
            else:
                # Separators, and labels or multipliers with nothing to attach to
                self._advance()
        return nodes

    def _parse_group(self) -> GroupNode:
        self._advance()  # '('
        items = self._parse_sequence()
        multiply = 1
        if self._check(TokenKind.RPAREN):
            self._advance()
            if self._check(TokenKind.MULT):
                multiply = self._advance().value or 0
        return GroupNode(items=items, multiply=multiply)

    def _parse_phase(self) -> PhaseNode:
        duration = self._advance()
        label = DEFAULT_PHASE_LABEL
        if self._check(TokenKind.LABEL):
            label = self._advance().text or DEFAULT_PHASE_LABEL
        return PhaseNode(
            seconds=parse_duration(duration.text),
            label=label,
            duration_text=duration.text,
        )

    def _at_end(self) -> bool:
        return self._pos >= len(self._tokens)

    def _peek(self) -> Optional[Token]:
        if self._at_end():
            return None
        return self._tokens[self._pos]

    def _check(self, kind: TokenKind) -> bool:
        token = self._peek()
        return token is not None and token.kind == kind

    def _advance(self) -> Token:
        token = self._tokens[self._pos]
        self._pos += 1
        return token


def parse(tokens: Sequence[Token]) -> List[AstNode]:
    """Parse tokens into a list of phase and group nodes"""
    return SequenceParser(tokens).parse()


def parse_pattern(pattern: str) -> List[AstNode]:
    """Tokenize and parse a raw pattern string"""
    return parse(tokenize(pattern))
