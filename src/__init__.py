"""
todofile - Renderer for daily plain-text todo files

Parses todo files written in a small markup (headings, [state] todos,
bullets, paragraphs, inline styling and links) and renders them as
canonical text, JSON, or desktop-widget markup.
"""

__version__ = "1.0.0"

from .lib import (
    Parser,
    Printer,
    HandlerRegistry,
    ParserError,
    HandlerDispatchError,
    document_parse,
    document_print,
    tokens_lex,
    LOG,
    state_connectToLogger,
)
from .config import TodoConfig, config_load

__all__ = [
    "Parser",
    "Printer",
    "HandlerRegistry",
    "ParserError",
    "HandlerDispatchError",
    "document_parse",
    "document_print",
    "tokens_lex",
    "TodoConfig",
    "config_load",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
