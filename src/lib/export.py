"""
Structured exports of a document tree

Plain dict/JSON views with stable field names for external walkers, and
the numbered link listing used to pick a link to open.

Every node carries a "kind" tag:
    heading entries: todo, bullet, text
    todo states:     defined, other (null for an unset state)
    spans:           normal, verbatim, underline, crossed, bold, italic,
                     link, text_extra
"""

import json
from typing import Any, Dict, List, Optional

from ..models.tokens import Span, Normal, Styled, Link, TextExtra
from ..models.document import File, Heading, Todo, Bullet, Text, Defined, Other, TodoState, UnderHeading


def span_toDict(span: Span) -> Dict[str, Any]:
    if isinstance(span, Normal):
        return {"kind": "normal", "text": span.text}
    if isinstance(span, Styled):
        return {"kind": span.kind, "children": spans_toList(span.children)}
    if isinstance(span, Link):
        return {
            "kind": "link",
            "name": span.name,
            "handler": span.handler.name,
            "known": span.handler.known,
            "path": span.path,
        }
    if isinstance(span, TextExtra):
        return {
            "kind": "text_extra",
            "delimiter": span.delimiter,
            "children": spans_toList(span.children),
        }
    raise TypeError(f"Unknown span kind: {span!r}")


def spans_toList(spans: List[Span]) -> List[Dict[str, Any]]:
    return [span_toDict(span) for span in spans]


def state_toDict(state: Optional[TodoState]) -> Optional[Dict[str, str]]:
    if isinstance(state, Defined):
        return {"kind": "defined", "text": state.text}
    if isinstance(state, Other):
        return {"kind": "other", "text": state.text}
    return None


def entry_toDict(entry: UnderHeading) -> Dict[str, Any]:
    if isinstance(entry, Todo):
        return {
            "kind": "todo",
            "state": state_toDict(entry.state),
            "description": spans_toList(entry.description.spans),
        }
    if isinstance(entry, Bullet):
        return {"kind": "bullet", "marker": entry.marker, "text": spans_toList(entry.text.spans)}
    if isinstance(entry, Text):
        return {"kind": "text", "text": spans_toList(entry.spans)}
    raise TypeError(f"Unknown heading entry: {entry!r}")


def heading_toDict(heading: Heading) -> Dict[str, Any]:
    return {"name": heading.name, "body": [entry_toDict(entry) for entry in heading.body]}


def document_toDict(document: File) -> Dict[str, Any]:
    """
    Full tree as nested dicts and lists

    Example:
        "# Work\\n[x] *ship*\\n" with alias x -> DONE gives
        {"headings": [{"name": "Work", "body": [
            {"kind": "todo",
             "state": {"kind": "defined", "text": "DONE"},
             "description": [{"kind": "bold", "children": [
                 {"kind": "normal", "text": "ship"}]}]}]}]}
    """
    return {"headings": [heading_toDict(heading) for heading in document.headings]}


def document_toJSON(document: File, indent: Optional[int] = 2) -> str:
    """Full tree serialized as JSON"""
    return json.dumps(document_toDict(document), indent=indent, ensure_ascii=False)


def links_list(document: File) -> List[str]:
    """
    Numbered link listing in document order

    Returns:
        Lines "{index} {name} - {handler}:{path}"; the index is what
        --openLink takes
    """
    return [
        f"{index} {link.name} - {link.handler.name}:{link.path}"
        for index, link in enumerate(document.links())
    ]
