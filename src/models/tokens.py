"""
Token and inline span models

Line-level tokens produced by the tokenizer, and the recursive inline span
tree carried by text-bearing tokens.

Span kinds form a closed set. Consumers (printer, exports) match on every
kind explicitly and raise TypeError for anything else, so a new kind can
never be silently dropped.
"""

from enum import Enum
from dataclasses import dataclass, field
from typing import ClassVar, Dict, List, Optional, Type, Union


class TokenKind(Enum):
    """Kinds of line-level tokens"""
    HEADING = "heading"              # # name
    BRACKET_OPEN = "bracket_open"    # [
    INSIDE = "inside"                # raw text between [ and ]
    BRACKET_CLOSE = "bracket_close"  # ]
    BULLET = "bullet"                # - inline text
    TEXT = "text"                    # inline text
    NEWLINE = "newline"


@dataclass
class Token:
    """
    One line-level token

    Attributes:
        kind: Token kind
        text: Heading name or bracket content (HEADING, INSIDE)
        spans: Inline-lexed payload (BULLET, TEXT)
        line: 1-based source line, diagnostic only (not compared)

    Example:
        "# Work\\n" lexes to
        [Token(TokenKind.HEADING, text="Work"), Token(TokenKind.NEWLINE)]
    """
    kind: TokenKind
    text: str = ""
    spans: List["Span"] = field(default_factory=list)
    line: int = field(default=1, compare=False)

    def describe(self) -> str:
        """Short human-readable form used in error messages"""
        if self.kind in (TokenKind.HEADING, TokenKind.INSIDE):
            return f"{self.kind.name}({self.text!r})"
        if self.kind in (TokenKind.BULLET, TokenKind.TEXT):
            return f"{self.kind.name}({len(self.spans)} spans)"
        return self.kind.name


@dataclass
class Handler:
    """
    Link handler reference

    known is None until the parser classifies the name against the
    configured handler names.
    """
    name: str
    known: Optional[bool] = None


@dataclass
class Normal:
    """Plain text leaf"""
    text: str


@dataclass
class Styled:
    """Common shape of the five delimiter-wrapped span kinds"""
    children: List["Span"] = field(default_factory=list)

    delimiter: ClassVar[str] = ""
    kind: ClassVar[str] = ""


@dataclass
class Verbatim(Styled):
    delimiter: ClassVar[str] = "`"
    kind: ClassVar[str] = "verbatim"


@dataclass
class Underline(Styled):
    delimiter: ClassVar[str] = "_"
    kind: ClassVar[str] = "underline"


@dataclass
class Crossed(Styled):
    delimiter: ClassVar[str] = "-"
    kind: ClassVar[str] = "crossed"


@dataclass
class Bold(Styled):
    delimiter: ClassVar[str] = "*"
    kind: ClassVar[str] = "bold"


@dataclass
class Italic(Styled):
    delimiter: ClassVar[str] = "/"
    kind: ClassVar[str] = "italic"


@dataclass
class Link:
    """
    Named link: |name[handler:path]|

    Only the name is shown in text output; handler and path surface in
    structured exports and link dispatch.
    """
    name: str
    handler: Handler
    path: str


@dataclass
class TextExtra:
    """
    Unterminated span

    A delimiter opened but never closed before end of line. Rendered as the
    bare delimiter followed by the children.
    """
    delimiter: str
    children: List["Span"] = field(default_factory=list)


Span = Union[Normal, Verbatim, Underline, Crossed, Bold, Italic, Link, TextExtra]

STYLED_SPANS: Dict[str, Type[Styled]] = {
    cls.delimiter: cls for cls in (Verbatim, Underline, Crossed, Bold, Italic)
}

LINK_DELIMITER = "|"

# Characters that end a Normal run
SPECIAL_CHARS = frozenset(STYLED_SPANS) | {LINK_DELIMITER, "\n"}
