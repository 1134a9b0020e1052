"""
Widget markup export for eww (ElKowar's wacky widgets)

Maps each todo's inline spans to eww widget expressions so a desktop
widget can show the day's todos with styling. Links become buttons whose
onclick runs the link command with the link's handler and path.

Output is a JSON list:
    [{"state": "[DONE]", "description": ["(label ...)", "(box ...)"]}]
"""

import json
import shlex
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ..config.user import TodoConfig
from ..models.tokens import Span, Normal, Styled, Link, TextExtra
from ..models.document import File
from .printer import state_text

# Box style per styled span kind
SPAN_STYLES: Dict[str, str] = {
    "verbatim": "color: #c3e88d;",
    "underline": "text-decoration: underline;",
    "crossed": "text-decoration: line-through;",
    "bold": "font-weight: bold;",
    "italic": "font-style: italic;",
}

LINK_STYLE = "text-decoration: underline; text-decoration-color: #ff5370;"


def quote(text: str) -> str:
    """Double-quoted eww string literal"""
    escaped = text.replace('\\', '\\\\').replace('"', '\\"')
    return f'"{escaped}"'


class EwwRenderer:
    """
    Renders spans to eww widget expressions

    Attributes:
        link_command: Command template for link buttons, with {handler},
                      {path}, {inputdir} and {outputdir} placeholders
                      (e.g. "todofile {inputdir} {outputdir} --openLinkRaw
                      {handler} {path}")
        inputdir: Value for {inputdir}
        outputdir: Value for {outputdir}
    """

    def __init__(self, link_command: str, inputdir: Union[str, Path] = ".", outputdir: Union[str, Path] = "."):
        self.link_command = link_command
        self.inputdir = inputdir
        self.outputdir = outputdir

    def command_make(self, link: Link) -> str:
        """
        Shell command a link button runs

        Every field is shell-quoted and all are substituted in one pass,
        so braces or quotes in paths never reach the template.
        """
        return self.link_command.format(
            handler=shlex.quote(link.handler.name),
            path=shlex.quote(link.path),
            inputdir=shlex.quote(str(self.inputdir)),
            outputdir=shlex.quote(str(self.outputdir)),
        )

    def spans_render(self, spans: List[Span]) -> str:
        return " ".join(self.span_render(span) for span in spans)

    def span_render(self, span: Span) -> str:
        if isinstance(span, Normal):
            return f'(label :halign "start" :text {quote(span.text)})'
        if isinstance(span, Styled):
            style = SPAN_STYLES[span.kind]
            return f'(box :style {quote(style)} :halign "start" {self.spans_render(span.children)})'
        if isinstance(span, Link):
            command = self.command_make(span)
            return (
                f'(button :style "all: unset" :onclick {quote(command + " &")} :halign "start" '
                f'(label :style {quote(LINK_STYLE)} :halign "start" :text {quote(span.name)}))'
            )
        if isinstance(span, TextExtra):
            return (
                f'(box :space-evenly false :halign "start" '
                f'(label :halign "start" :text {quote(span.delimiter)}) {self.spans_render(span.children)})'
            )
        raise TypeError(f"Unknown span kind: {span!r}")


def ewwTodos_build(
    document: File,
    config: Optional[TodoConfig] = None,
    link_command: str = "",
    inputdir: Union[str, Path] = ".",
    outputdir: Union[str, Path] = ".",
) -> List[Dict[str, Any]]:
    """
    One widget entry per todo, across all headings

    Args:
        document: Parsed File
        config: User config (state default and bracket policy)
        link_command: Command template for link buttons
        inputdir: Todo directory substituted into the link command
        outputdir: Output directory substituted into the link command

    Returns:
        List of {"state": str, "description": [widget expressions]}
    """
    config = config or TodoConfig()
    brackets = config.stateOps_get().brackets
    renderer = EwwRenderer(link_command, inputdir, outputdir)

    todos = []
    for todo in document.todos():
        state = state_text(todo.state, config)
        todos.append({
            "state": f"[{state}]" if brackets else state,
            "description": [renderer.span_render(span) for span in todo.description.spans],
        })
    return todos


def ewwTodos_toJSON(
    document: File,
    config: Optional[TodoConfig] = None,
    link_command: str = "",
    inputdir: Union[str, Path] = ".",
    outputdir: Union[str, Path] = ".",
) -> str:
    todos = ewwTodos_build(document, config, link_command, inputdir, outputdir)
    return json.dumps(todos, indent=2, ensure_ascii=False)
