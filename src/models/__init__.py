"""
Models package for todofile

Contains data structures for tokens, inline spans, the document tree and
the pipeline state.
"""

from .state import ProgramState, pipeline
from .tokens import (
    Token,
    TokenKind,
    Handler,
    Normal,
    Styled,
    Verbatim,
    Underline,
    Crossed,
    Bold,
    Italic,
    Link,
    TextExtra,
    Span,
)
from .document import File, Heading, Todo, TodoState, Defined, Other, Bullet, Text, UnderHeading

__all__ = [
    "ProgramState",
    "pipeline",
    "Token",
    "TokenKind",
    "Handler",
    "Normal",
    "Styled",
    "Verbatim",
    "Underline",
    "Crossed",
    "Bold",
    "Italic",
    "Link",
    "TextExtra",
    "Span",
    "File",
    "Heading",
    "Todo",
    "TodoState",
    "Defined",
    "Other",
    "Bullet",
    "Text",
    "UnderHeading",
]
