"""
Document tree models

Typed tree produced by the parser and consumed by the printer and the
exports. The tree owns every node; nothing is shared or back-referenced.

Structure:
    File
      └── Heading (name)
            ├── Todo (state, description)
            ├── Bullet (marker, text)
            └── Text (spans)
"""

from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Union

from .tokens import Link, Span, Styled, TextExtra


@dataclass
class Defined:
    """Todo state whose raw text matched a configured alias (holds the mapped text)"""
    text: str


@dataclass
class Other:
    """Todo state with no configured alias (holds the raw text)"""
    text: str


TodoState = Union[Defined, Other]


@dataclass
class Text:
    """Ordered sequence of inline spans"""
    spans: List[Span] = field(default_factory=list)

    def links(self) -> List[Link]:
        """Links in document order, including those nested in styled spans"""
        return list(spans_walkLinks(self.spans))


@dataclass
class Todo:
    """
    Todo item: [state] description

    Attributes:
        state: Resolved state, or None for empty brackets ("no explicit
               state"; the printer substitutes the configured default)
        description: Inline text after the closing bracket
    """
    state: Optional[TodoState]
    description: Text


@dataclass
class Bullet:
    """Bullet line; marker is the source marker character"""
    text: Text
    marker: str = "-"


UnderHeading = Union[Todo, Bullet, Text]


@dataclass
class Heading:
    """Heading with its body entries (headings never nest)"""
    name: str
    body: List[UnderHeading] = field(default_factory=list)

    def todos(self) -> List[Todo]:
        return [entry for entry in self.body if isinstance(entry, Todo)]

    def links(self) -> List[Link]:
        links: List[Link] = []
        for entry in self.body:
            if isinstance(entry, Todo):
                links.extend(entry.description.links())
            elif isinstance(entry, Bullet):
                links.extend(entry.text.links())
            else:
                links.extend(entry.links())
        return links


@dataclass
class File:
    """A whole todo file: ordered headings"""
    headings: List[Heading] = field(default_factory=list)

    def todos(self) -> List[Todo]:
        return [todo for heading in self.headings for todo in heading.todos()]

    def links(self) -> List[Link]:
        return [link for heading in self.headings for link in heading.links()]


def spans_walkLinks(spans: List[Span]) -> Iterator[Link]:
    """Yield every Link in a span list, depth first"""
    for span in spans:
        if isinstance(span, Link):
            yield span
        elif isinstance(span, (Styled, TextExtra)):
            yield from spans_walkLinks(span.children)
