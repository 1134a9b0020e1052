"""
Tokenizer for .todo markup

Turns raw text into line-level tokens. Text-bearing lines (bullets, plain
text, todo descriptions) carry their inline markup already lexed into a
span tree.

Line level (after skipping leading spaces and tabs):
    # name        -> HEADING, NEWLINE
    [state] text  -> BRACKET_OPEN, INSIDE, BRACKET_CLOSE, TEXT
    - text        -> BULLET
    text          -> TEXT
    \\n            -> NEWLINE

Inline level (within one line):
    `verbatim`  _underline_  -crossed-  *bold*  /italic/
    |name[handler:path]|

The tokenizer is total: markup that is never closed degrades to a
TextExtra span (literal delimiter followed by what did parse) instead of
failing.

Example:
    "# Work\\n[x] *ship* it\\n" lexes to
        HEADING('Work'), NEWLINE,
        BRACKET_OPEN, INSIDE('x'), BRACKET_CLOSE,
        TEXT([Bold([Normal('ship')]), Normal(' it')]), NEWLINE
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from ..models.tokens import (
    Token,
    TokenKind,
    Span,
    Normal,
    Link,
    Handler,
    TextExtra,
    STYLED_SPANS,
    LINK_DELIMITER,
    SPECIAL_CHARS,
)
from .log import LOG

# Whitespace ignored at line start and around heading names
LINE_SPACE = " \t\r\x0b\x0c"


@dataclass
class OpenSpan:
    """
    A span whose closing delimiter has not been seen yet

    Attributes:
        delimiter: Opening delimiter, None for the top level of a line
        children: Spans lexed so far
        single: Close as soon as one child is present (the '|' fallback)
    """
    delimiter: Optional[str]
    children: List[Span] = field(default_factory=list)
    single: bool = False


class Tokenizer:
    """
    Scanner over one source string

    Attributes:
        source: Text being tokenized
        position: Current character position
        line_number: Current 1-based line (stamped onto emitted tokens)
        tokens: Tokens emitted so far
    """

    def __init__(self, source: str):
        self.source = source
        self.position = 0
        self.line_number = 1
        self.tokens: List[Token] = []

    def peek(self) -> Optional[str]:
        """Character at the current position, or None at end of input"""
        if self.position < len(self.source):
            return self.source[self.position]
        return None

    def spaces_skip(self) -> None:
        """Skip insignificant whitespace (anything but newline)"""
        while self.position < len(self.source) and self.source[self.position] in LINE_SPACE:
            self.position += 1

    def token_emit(self, kind: TokenKind, text: str = "", spans: Optional[List[Span]] = None) -> None:
        self.tokens.append(
            Token(kind=kind, text=text, spans=spans or [], line=self.line_number)
        )

    def lex(self) -> List[Token]:
        """
        Tokenize the whole source

        Every iteration starts at the beginning of an unconsumed line
        (possibly after leading spaces).

        Returns:
            Flat list of line-level tokens; empty for empty source
        """
        while self.position < len(self.source):
            char = self.source[self.position]

            if char in LINE_SPACE:
                self.position += 1
            elif char == '\n':
                self.newline_lex()
            elif char == '#':
                self.heading_lex()
            elif char == '[':
                self.todo_lex()
            elif char == '-':
                self.position += 1
                self.spaces_skip()
                self.token_emit(TokenKind.BULLET, spans=self.spans_lex())
            else:
                self.token_emit(TokenKind.TEXT, spans=self.spans_lex())

        LOG(f"Tokenized {self.line_number} lines into {len(self.tokens)} tokens", level=3)
        return self.tokens

    def newline_lex(self) -> None:
        self.token_emit(TokenKind.NEWLINE)
        self.position += 1
        self.line_number += 1

    def heading_lex(self) -> None:
        """
        Lex '# name' up to end of line

        A NEWLINE token always follows the heading, also when the heading
        is the last line of input with no trailing newline.
        """
        self.position += 1
        self.spaces_skip()

        end = self.source.find('\n', self.position)
        if end == -1:
            end = len(self.source)

        self.token_emit(TokenKind.HEADING, text=self.source[self.position:end].rstrip(LINE_SPACE))
        self.position = end

        if self.peek() == '\n':
            self.newline_lex()
        else:
            self.token_emit(TokenKind.NEWLINE)

    def todo_lex(self) -> None:
        """
        Lex '[inside] description'

        Content up to the next ']' is taken verbatim (no nested brackets).
        The rest of the line is always emitted as a TEXT token, possibly
        with no spans.
        """
        self.token_emit(TokenKind.BRACKET_OPEN)
        self.position += 1
        self.spaces_skip()

        end = self.source.find(']', self.position)
        if end == -1:
            inside = self.source[self.position:]
            self.position = len(self.source)
        else:
            inside = self.source[self.position:end]
            self.position = end + 1

        self.token_emit(TokenKind.INSIDE, text=inside)
        self.line_number += inside.count('\n')
        self.token_emit(TokenKind.BRACKET_CLOSE)

        self.spaces_skip()
        self.token_emit(TokenKind.TEXT, spans=self.spans_lex())

    def spans_lex(self) -> List[Span]:
        """
        Lex inline markup up to (not including) end of line

        Open spans are kept on an explicit stack, so arbitrarily deep
        nesting never exhausts the interpreter stack.

        For an opening delimiter d:
            1. consume d and lex one child
            2. at end of line, close as TextExtra(d, children)
            3. at d, consume it and close as the styled span
            4. otherwise lex another child and repeat

        Returns:
            Top-level spans of the line
        """
        stack: List[OpenSpan] = [OpenSpan(delimiter=None)]

        while True:
            char = self.peek()
            top = stack[-1]
            at_eol = char is None or char == '\n'
            needs_child = top.delimiter is not None and not top.children

            if at_eol:
                if len(stack) == 1:
                    return top.children
                if needs_child:
                    self.child_add(stack, Normal(""))
                    continue
                stack.pop()
                self.child_add(stack, TextExtra(top.delimiter, top.children))
                continue

            if char == top.delimiter and not needs_child and not top.single:
                self.position += 1
                stack.pop()
                self.child_add(stack, STYLED_SPANS[char](top.children))
                continue

            if char in STYLED_SPANS:
                self.position += 1
                stack.append(OpenSpan(delimiter=char))
            elif char == LINK_DELIMITER:
                link = self.link_lex()
                if link is not None:
                    self.child_add(stack, link)
                else:
                    self.position += 1
                    stack.append(OpenSpan(delimiter=LINK_DELIMITER, single=True))
            else:
                self.child_add(stack, self.normal_lex())

    @staticmethod
    def child_add(stack: List[OpenSpan], span: Span) -> None:
        """Append a finished span to the innermost open span, closing '|' fallbacks"""
        stack[-1].children.append(span)
        while stack[-1].single:
            fallback = stack.pop()
            stack[-1].children.append(TextExtra(fallback.delimiter, fallback.children))

    def normal_lex(self) -> Normal:
        """Greedy run of non-special characters (at least one)"""
        start = self.position
        self.position += 1
        while self.position < len(self.source) and self.source[self.position] not in SPECIAL_CHARS:
            self.position += 1
        return Normal(self.source[start:self.position])

    def link_lex(self) -> Optional[Link]:
        """
        Lex '|name[handler:path]|' at the current '|'

        Consumes input only when the whole link is present on this line.

        Returns:
            Link with an unclassified Handler, or None if the lookahead
            scan failed (position unchanged)
        """
        match = self.link_match(self.position + 1)
        if match is None:
            return None

        name, handler, path, end = match
        self.position = end
        return Link(name=name, handler=Handler(handler), path=path)

    def link_match(self, start: int) -> Optional[Tuple[str, str, str, int]]:
        """
        Scan for 'name[handler:path]|' starting right after the opening '|'

        Looks for '[', ':' and ']' in that order, then requires '|'
        immediately after ']'. A newline, end of input, or '|' before the
        ']' fails the scan.

        Args:
            start: Position just past the opening '|'

        Returns:
            (name, handler, path, position past the closing '|'), or None

        Example:
            For "|Site[open:https://x]|" with start=1:
            ("Site", "open", "https://x", 22)
        """
        pieces: List[str] = []
        pos = start

        for target in '[:]':
            end = pos
            while True:
                if end >= len(self.source):
                    return None
                char = self.source[end]
                if char == target:
                    break
                if char in '\n|':
                    return None
                end += 1
            pieces.append(self.source[pos:end])
            pos = end + 1

        if pos >= len(self.source) or self.source[pos] != LINK_DELIMITER:
            return None

        return pieces[0], pieces[1], pieces[2], pos + 1


def tokens_lex(source: str) -> List[Token]:
    """
    Tokenize a whole .todo document

    Args:
        source: Document text

    Returns:
        Line-level tokens (never raises)
    """
    return Tokenizer(source).lex()


def spans_lex(line: str) -> List[Span]:
    """
    Lex one line of inline markup

    Args:
        line: Inline text (lexing stops at the first newline)

    Returns:
        Top-level spans
    """
    return Tokenizer(line).spans_lex()
