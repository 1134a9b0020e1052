"""
Printer for .todo document trees

Serializes a parsed File back to canonical markup text. Printing is a
left inverse of parsing at a fixed wrap width: re-parsing the output gives
back the same tree, except that paragraph text is re-flowed.

Output shape:
    # Heading
        [state] todo description
        - bullet text
        Paragraph text wrapped at width - 4 and indented as a
        block.

    # Next heading
"""

import shutil
import textwrap
from typing import List, Optional

from ..config.user import TodoConfig
from ..models.tokens import Span, Normal, Styled, Link, TextExtra, LINK_DELIMITER
from ..models.document import File, Heading, Todo, Bullet, Text, Defined, Other, TodoState

INDENT = "    "
DEFAULT_WIDTH = 80

# A wrapped line starting with one of these would lex as a heading, bullet or todo
LINE_MARKERS = "#-["


class ParagraphWrapper(textwrap.TextWrapper):
    """
    TextWrapper that never starts a continuation line with a line marker

    A word beginning with '#', '-' or '[' is glued to the word before it,
    so the pair always lands on the same line.
    """

    def __init__(self, width: int):
        super().__init__(width=width, break_long_words=False, break_on_hyphens=False)

    def _split(self, text: str) -> List[str]:
        chunks: List[str] = []
        for chunk in super()._split(text):
            if chunk[0] in LINE_MARKERS and len(chunks) >= 2 and chunks[-1].isspace():
                whitespace = chunks.pop()
                chunks[-1] += whitespace + chunk
            else:
                chunks.append(chunk)
        return chunks


def width_resolve(width: Optional[int] = None) -> int:
    """Explicit width, else the terminal width (80 when unknown)"""
    if width is not None:
        return width
    return shutil.get_terminal_size((DEFAULT_WIDTH, 24)).columns


def spans_render(spans: List[Span]) -> str:
    """Render inline spans back to markup"""
    return "".join(span_render(span) for span in spans)


def span_render(span: Span) -> str:
    """
    Render one span

    Styled spans re-emit their delimiter pair, links show only their name,
    and unterminated spans re-emit the bare opening delimiter.
    """
    if isinstance(span, Normal):
        return span.text
    if isinstance(span, Styled):
        return f"{span.delimiter}{spans_render(span.children)}{span.delimiter}"
    if isinstance(span, Link):
        return f"{LINK_DELIMITER}{span.name}{LINK_DELIMITER}"
    if isinstance(span, TextExtra):
        return f"{span.delimiter}{spans_render(span.children)}"
    raise TypeError(f"Unknown span kind: {span!r}")


def state_text(state: Optional[TodoState], config: TodoConfig) -> str:
    """State text to print; the configured default for an unset state"""
    if isinstance(state, (Defined, Other)):
        return state.text
    return config.stateOps_get().default or " "


class Printer:
    """
    Renders a document tree with a fixed config and wrap width

    Attributes:
        config: User config (bullet point, state policy)
        width: Total line width paragraphs are wrapped to
    """

    def __init__(self, config: Optional[TodoConfig] = None, width: Optional[int] = None):
        self.config = config or TodoConfig()
        self.width = width_resolve(width)

    def file_print(self, document: File) -> str:
        return "\n".join(self.heading_print(heading) for heading in document.headings)

    def heading_print(self, heading: Heading) -> str:
        buf = f"# {heading.name}\n"

        for entry in heading.body:
            if isinstance(entry, Todo):
                buf += f"{INDENT}{self.todo_print(entry)}\n"
            elif isinstance(entry, Bullet):
                buf += f"{INDENT}{self.bullet_print(entry)}\n"
            elif isinstance(entry, Text):
                buf += self.text_print(entry)
            else:
                raise TypeError(f"Unknown heading entry: {entry!r}")

        return buf

    def todo_print(self, todo: Todo) -> str:
        state = state_text(todo.state, self.config)
        description = spans_render(todo.description.spans)

        if self.config.stateOps_get().brackets:
            return f"[{state}] {description}"
        return f"{state} {description}"

    def bullet_print(self, bullet: Bullet) -> str:
        marker = self.config.bullet_point or bullet.marker
        return f"{marker} {spans_render(bullet.text.spans)}"

    def text_print(self, text: Text) -> str:
        """
        Paragraph text, re-flowed at width - 4 and indented as a block

        A paragraph with no visible text prints nothing, since a blank
        line would end the heading.
        """
        wrapper = ParagraphWrapper(width=max(self.width - len(INDENT), 1))
        filled = wrapper.fill(spans_render(text.spans))
        if not filled.strip():
            return ""
        return textwrap.indent(filled, INDENT) + "\n"


def document_print(document: File, config: Optional[TodoConfig] = None, width: Optional[int] = None) -> str:
    """
    Serialize a document tree to canonical markup text

    Args:
        document: Parsed File
        config: User config
        width: Wrap width for paragraphs (None: terminal width)

    Returns:
        Markup text (never raises for trees the parser produces)
    """
    return Printer(config, width).file_print(document)
