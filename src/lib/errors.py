"""
Parser errors with a grammar-rule stack

A ParserError carries one terminal cause and the list of grammar rules it
unwound through. Frames are appended as the error propagates, so the list
is innermost first:

    Expected one of BRACKET_CLOSE, got NEWLINE (line 3):
      in Todo (line 3)
      in Heading (line 1)
      in File (line 1)

The stack is diagnostic only; no rule recovers from an error.
"""

import functools
from dataclasses import dataclass
from typing import Any, Callable, Deque, FrozenSet, List, Optional, TypeVar, Union

from ..models.tokens import Token

F = TypeVar("F", bound=Callable[..., Any])


@dataclass
class UnexpectedToken:
    """The next token is none of the kinds the rule accepts"""
    expected: FrozenSet[str]
    got: Token

    def __str__(self) -> str:
        expected = ", ".join(sorted(self.expected))
        return f"Expected one of {expected}, got {self.got.describe()} (line {self.got.line})"


@dataclass
class EndOfInput:
    """The rule needed another token but none are left"""

    def __str__(self) -> str:
        return "Expected more tokens, got end of input"


@dataclass
class StructuralViolation:
    """Well-formed token in a place the document structure forbids"""
    message: str
    token: Token

    def __str__(self) -> str:
        return f"{self.message} (line {self.token.line})"


ParserErrorCause = Union[UnexpectedToken, EndOfInput, StructuralViolation]


@dataclass
class ErrorFrame:
    """
    One grammar rule on the error stack

    Attributes:
        rule: Rule name (e.g., "Todo")
        line: Source line of the first token the rule saw, None at end of input
    """
    rule: str
    line: Optional[int] = None

    def __str__(self) -> str:
        where = f"line {self.line}" if self.line is not None else "end of input"
        return f"in {self.rule} ({where})"


class ParserError(Exception):
    """
    Unrecoverable parse failure

    Attributes:
        cause: Terminal cause
        frames: Grammar rules unwound through, innermost first
    """

    def __init__(self, cause: ParserErrorCause, frames: Optional[List[ErrorFrame]] = None):
        self.cause = cause
        self.frames: List[ErrorFrame] = list(frames or [])
        super().__init__(str(cause))

    def frame_push(self, frame: ErrorFrame) -> None:
        """Record an enclosing rule (called while unwinding)"""
        self.frames.append(frame)

    def rules(self) -> List[str]:
        return [frame.rule for frame in self.frames]

    def __str__(self) -> str:
        lines = [f"{self.cause}:"]
        lines.extend(f"  {frame}" for frame in self.frames)
        return "\n".join(lines)


class HandlerDispatchError(Exception):
    """
    Activating a link failed

    Raised for an unknown handler name, or wrapping the failure of a known
    handler. Fatal only to that one action.
    """

    def __init__(self, handler: str, path: str, reason: str = "unknown link handler"):
        self.handler = handler
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot open '{path}' with handler '{handler}': {reason}")


def grammar_rule(name: str) -> Callable[[F], F]:
    """
    Decorate a grammar rule method so failures record a frame

    The wrapped method must take the token deque as its first argument
    after self. The frame's line is taken from the first token before the
    rule consumed anything.

    Args:
        name: Rule name shown in the error stack

    Example:
        @grammar_rule("Todo")
        def todo_parse(self, tokens): ...
    """

    def decorator(method: F) -> F:
        @functools.wraps(method)
        def wrapper(self: Any, tokens: Deque[Token], *args: Any, **kwargs: Any) -> Any:
            line = tokens[0].line if tokens else None
            try:
                return method(self, tokens, *args, **kwargs)
            except ParserError as err:
                err.frame_push(ErrorFrame(rule=name, line=line))
                raise

        return wrapper  # type: ignore[return-value]

    return decorator
