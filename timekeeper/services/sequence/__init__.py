from .duration_parser import parse_duration, format_duration, format_clock
from .tokenizer import Token, TokenKind, tokenize
from .parser import SequenceParser, parse, parse_pattern
from .expander import MAX_PHASES, count_phases, expand, summarize

__all__ = [
    "parse_duration", "format_duration", "format_clock",
    "Token", "TokenKind", "tokenize",
    "SequenceParser", "parse", "parse_pattern",
    "MAX_PHASES", "count_phases", "expand", "summarize",
]
