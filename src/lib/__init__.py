"""
todofile - Renderer for daily plain-text todo files

Text-format engine: tokenizer, parser, printer and exports.
"""

__version__ = "1.0.0"

from .tokenizer import Tokenizer, tokens_lex, spans_lex
from .parser import Parser, document_parse
from .printer import Printer, document_print
from .errors import ParserError, HandlerDispatchError
from .handlers import HandlerRegistry
from .log import LOG, state_connectToLogger

__all__ = [
    "Tokenizer",
    "tokens_lex",
    "spans_lex",
    "Parser",
    "document_parse",
    "Printer",
    "document_print",
    "ParserError",
    "HandlerDispatchError",
    "HandlerRegistry",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
