"""
Parser for .todo token streams

Transforms the tokenizer's line-level tokens into a typed document tree.

Grammar:
    File         := NEWLINE* (Heading NEWLINE*)*
    Heading      := HEADING NEWLINE UnderHeading* (NEWLINE | EOF)
    UnderHeading := Todo | Bullet | Text
    Todo         := BRACKET_OPEN TodoState? BRACKET_CLOSE TEXT (NEWLINE | EOF)
    TodoState    := INSIDE
    Bullet       := BULLET (NEWLINE | EOF)
    Text         := TEXT (NEWLINE | EOF)

Key features:
- Single pass, tokens consumed front to back, no backtracking
- Rule choice by pure *_check predicates over the first one or two tokens
- Todo states resolved against the configured alias table
- Link handlers classified as known/unknown against configured names
- Every failing rule adds a frame to the ParserError it propagates

Example:
    >>> parser = Parser(TodoConfig(todo_state={"x": "DONE"}))
    >>> document = parser.parse(tokens_lex("# Work\\n[x] buy milk\\n"))
    >>> document.headings[0].body[0].state
    Defined(text='DONE')
"""

from collections import deque
from typing import Deque, FrozenSet, Iterable, List, Optional

from ..config.user import TodoConfig
from ..models.tokens import Token, TokenKind, Span, Styled, Link, Handler, TextExtra
from ..models.document import File, Heading, Todo, TodoState, Defined, Other, Bullet, Text, UnderHeading
from .errors import ParserError, UnexpectedToken, EndOfInput, StructuralViolation, grammar_rule
from .tokenizer import tokens_lex
from .log import LOG


def kind_at(tokens: Deque[Token], index: int) -> Optional[TokenKind]:
    """Kind of the token at a lookahead index, None past the end"""
    if index < len(tokens):
        return tokens[index].kind
    return None


def heading_check(tokens: Deque[Token]) -> bool:
    return kind_at(tokens, 0) is TokenKind.HEADING


def todo_check(tokens: Deque[Token]) -> bool:
    return kind_at(tokens, 0) is TokenKind.BRACKET_OPEN


def todoState_check(tokens: Deque[Token]) -> bool:
    """Bracket content followed by the closing bracket"""
    return (
        kind_at(tokens, 0) is TokenKind.INSIDE
        and kind_at(tokens, 1) is TokenKind.BRACKET_CLOSE
    )


def bullet_check(tokens: Deque[Token]) -> bool:
    return kind_at(tokens, 0) is TokenKind.BULLET


def text_check(tokens: Deque[Token]) -> bool:
    return kind_at(tokens, 0) is TokenKind.TEXT


# Tokens that may start a heading body entry (for error messages)
UNDER_HEADING_START: FrozenSet[str] = frozenset(
    kind.name for kind in (TokenKind.BRACKET_OPEN, TokenKind.BULLET, TokenKind.TEXT, TokenKind.NEWLINE)
)


def token_expect(tokens: Deque[Token], *kinds: TokenKind) -> Token:
    """
    Consume the next token, requiring one of the given kinds

    Args:
        tokens: Remaining tokens
        *kinds: Accepted token kinds

    Returns:
        The consumed token

    Raises:
        ParserError: EndOfInput if no tokens are left, UnexpectedToken if
                     the next token has another kind
    """
    if not tokens:
        raise ParserError(EndOfInput())

    token = tokens.popleft()
    if token.kind not in kinds:
        raise ParserError(UnexpectedToken(
            expected=frozenset(kind.name for kind in kinds),
            got=token,
        ))
    return token


def lineEnd_expect(tokens: Deque[Token]) -> None:
    """Consume the NEWLINE ending a body line; end of input also ends it"""
    if tokens:
        token_expect(tokens, TokenKind.NEWLINE)


class Parser:
    """
    Recursive-descent parser for .todo documents

    The config is only read: the alias table resolves todo states and the
    handler names classify links. A Parser holds no per-parse state and
    can be reused.
    """

    def __init__(self, config: Optional[TodoConfig] = None):
        """
        Initialize parser

        Args:
            config: User config (defaults to an empty TodoConfig)
        """
        self.config = config or TodoConfig()
        self.handler_names = self.config.handler_names

    def parse(self, tokens: Iterable[Token]) -> File:
        """
        Parse a complete token stream into a document tree

        Args:
            tokens: Tokens from tokens_lex()

        Returns:
            File tree

        Raises:
            ParserError: On the first grammar violation; no partial tree
        """
        queue: Deque[Token] = deque(tokens)
        LOG(f"Parsing {len(queue)} tokens", level=3)
        document = self.file_parse(queue)
        LOG(f"Parsed {len(document.headings)} headings", level=3)
        return document

    @grammar_rule("File")
    def file_parse(self, tokens: Deque[Token]) -> File:
        headings: List[Heading] = []

        while tokens:
            if kind_at(tokens, 0) is TokenKind.NEWLINE:
                tokens.popleft()
                continue
            headings.append(self.heading_parse(tokens))

        return File(headings=headings)

    @grammar_rule("Heading")
    def heading_parse(self, tokens: Deque[Token]) -> Heading:
        """
        Parse a heading and its body up to a blank line or end of input

        Body entries are tried in order Todo, Bullet, Text. A heading token
        inside the body is a structural violation; any other token is
        unexpected.
        """
        name = token_expect(tokens, TokenKind.HEADING).text
        token_expect(tokens, TokenKind.NEWLINE)
        body: List[UnderHeading] = []

        while tokens:
            if kind_at(tokens, 0) is TokenKind.NEWLINE:
                tokens.popleft()
                break

            if todo_check(tokens):
                body.append(self.todo_parse(tokens))
            elif bullet_check(tokens):
                body.append(self.bullet_parse(tokens))
            elif text_check(tokens):
                body.append(self.text_parse(tokens))
            elif heading_check(tokens):
                raise ParserError(StructuralViolation(
                    message=f"Heading '{tokens[0].text}' cannot be nested inside heading '{name}'",
                    token=tokens[0],
                ))
            else:
                raise ParserError(UnexpectedToken(expected=UNDER_HEADING_START, got=tokens[0]))

        return Heading(name=name, body=body)

    @grammar_rule("Todo")
    def todo_parse(self, tokens: Deque[Token]) -> Todo:
        token_expect(tokens, TokenKind.BRACKET_OPEN)
        state = self.todoState_parse(tokens) if todoState_check(tokens) else None
        token_expect(tokens, TokenKind.BRACKET_CLOSE)
        description = token_expect(tokens, TokenKind.TEXT)
        lineEnd_expect(tokens)

        return Todo(state=state, description=Text(self.spans_resolve(description.spans)))

    @grammar_rule("TodoState")
    def todoState_parse(self, tokens: Deque[Token]) -> Optional[TodoState]:
        raw = token_expect(tokens, TokenKind.INSIDE).text
        return self.state_resolve(raw)

    def state_resolve(self, raw: str) -> Optional[TodoState]:
        """
        Resolve raw bracket content against the alias table

        Returns:
            None for empty content, Defined(mapped) on an alias hit,
            Other(raw) otherwise
        """
        if not raw:
            return None
        if raw in self.config.todo_state:
            return Defined(self.config.todo_state[raw])
        return Other(raw)

    @grammar_rule("Bullet")
    def bullet_parse(self, tokens: Deque[Token]) -> Bullet:
        token = token_expect(tokens, TokenKind.BULLET)
        lineEnd_expect(tokens)
        return Bullet(text=Text(self.spans_resolve(token.spans)))

    @grammar_rule("Text")
    def text_parse(self, tokens: Deque[Token]) -> Text:
        token = token_expect(tokens, TokenKind.TEXT)
        lineEnd_expect(tokens)
        return Text(self.spans_resolve(token.spans))

    def spans_resolve(self, spans: List[Span]) -> List[Span]:
        """Copy a span tree, classifying every link handler"""
        return [self.span_resolve(span) for span in spans]

    def span_resolve(self, span: Span) -> Span:
        if isinstance(span, Link):
            handler = Handler(span.handler.name, known=span.handler.name in self.handler_names)
            return Link(name=span.name, handler=handler, path=span.path)
        if isinstance(span, Styled):
            return type(span)(self.spans_resolve(span.children))
        if isinstance(span, TextExtra):
            return TextExtra(span.delimiter, self.spans_resolve(span.children))
        return span


def document_parse(source: str, config: Optional[TodoConfig] = None) -> File:
    """
    Tokenize and parse a whole document

    Args:
        source: Document text (already read in full)
        config: User config

    Returns:
        File tree

    Raises:
        ParserError: If the token stream violates the grammar
    """
    return Parser(config).parse(tokens_lex(source))
