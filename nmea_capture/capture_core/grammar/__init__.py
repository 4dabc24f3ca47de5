"""Sentence grammars and the matcher that applies them."""

from .grammar_table import Grammar, compile_grammar, grammar_table
from .sentence_matcher import SentenceMatch, SentenceMatcher, Span

__all__ = [
    "Grammar",
    "compile_grammar",
    "grammar_table",
    "SentenceMatch",
    "SentenceMatcher",
    "Span",
]
