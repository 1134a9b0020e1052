#!/usr/bin/env python3
"""
todofile - Renderer for daily plain-text todo files

Reads one .todo file from the input directory, parses it, and renders it
into the output directory (and to stdout) in the requested format.

As an aside, this codebase leverages the ChRIS "plugin" concept/pattern as
general purpose python app development framework.

Todo file markup:
    # Heading
    [x] todo with a state marker
    - bullet
    Paragraph text with *bold*, /italic/, _underline_, -crossed-,
    `verbatim` and |named links[handler:path]|.

Formats:
    show       canonical text (paragraphs re-flowed)
    raw        JSON document tree
    eww        JSON list of todos as eww widget markup
    tokens     tokenizer output
    links      numbered link list
    highlight  source with terminal colors
    config     effective todo config as JSON (no todo file is read)

Usage:
    todofile inputdir/ outputdir/ --day t
    todofile ~/todo /tmp/todo --inputFile groceries --format raw
    todofile ~/todo /tmp/todo --day tmr --openLink 0
    todofile ~/todo /tmp/todo --openLinkRaw open https://example.org
"""

import sys
from pathlib import Path
from argparse import ArgumentParser, Namespace, ArgumentDefaultsHelpFormatter

from chris_plugin import chris_plugin
from .config import appsettings, ConfigError, config_load as todoConfig_load
from .lib import __version__, LOG, state_connectToLogger
from .lib.tokenizer import tokens_lex
from .lib.parser import Parser
from .lib.printer import document_print
from .lib.errors import ParserError, HandlerDispatchError
from .lib.handlers import HandlerRegistry
from .lib.export import document_toJSON, links_list
from .lib.eww import ewwTodos_toJSON
from .lib.lexer import source_highlight
from .models import ProgramState, pipeline
from .config.settings import DAY_OFFSETS


# Output file suffix per format
FORMAT_SUFFIXES = {
    "show": ".txt",
    "raw": ".json",
    "eww": ".eww.json",
    "tokens": ".tokens.txt",
    "links": ".links.txt",
    "highlight": ".ansi",
    "config": ".json",
}

# Formats that only need the raw source, not a parsed document
SOURCE_FORMATS = {"tokens", "highlight"}

# Define CLI arguments
parser = ArgumentParser(
    description="todofile - Renderer for daily plain-text todo files",
    formatter_class=ArgumentDefaultsHelpFormatter,
)

parser.add_argument(
    "--inputFile",
    default="",
    type=str,
    help="Todo file name inside inputdir (extension optional); overrides --day",
)

parser.add_argument(
    "--day",
    default="t",
    choices=sorted(DAY_OFFSETS),
    help="Dated todo file to use: y (yesterday), t (today), tmr (tomorrow)",
)

parser.add_argument(
    "--format",
    default="show",
    choices=list(FORMAT_SUFFIXES),
    help="Output format",
)

parser.add_argument(
    "--configFile",
    default=None,
    type=str,
    help="YAML todo config (defaults to TODOFILE_CONFIG_FILE or ~/.config/todo/config.yaml)",
)

parser.add_argument(
    "--openLink",
    default=None,
    type=int,
    help="Open the link with this index (see --format links) after rendering",
)

parser.add_argument(
    "--openLinkRaw",
    default=None,
    nargs=2,
    metavar=("HANDLER", "PATH"),
    help="Open PATH with a configured link handler; no todo file is read",
)

parser.add_argument(
    "-v",
    "--verbosity",
    action="count",
    default=1,
    help="Increase output verbosity (can be repeated: -v, -vv, -vvv)",
)

parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")


def config_load(inputstate: ProgramState) -> ProgramState:
    """
    Load the user's YAML todo config.

    Args:
        inputstate: Program state with optional configFile override

    Returns:
        ProgramState with added field:
            - todoConfig: Validated TodoConfig

    Exits:
        1 if the config file is unreadable or invalid
    """
    state = inputstate.copy()

    config_path = state.configFile or appsettings.config_file
    LOG(f"Loading config from {config_path}", level=2)

    try:
        state.todoConfig = todoConfig_load(config_path)
    except ConfigError as e:
        print(f"Config error: {e}", file=sys.stderr)
        sys.exit(1)

    LOG(f"{len(state.todoConfig.todo_state)} state aliases, "
        f"{len(state.todoConfig.handlers)} link handlers", level=2)
    return state


def env_check(inputstate: ProgramState) -> ProgramState:
    """
    Resolve the todo file and the output file.

    The file is --inputFile when given, otherwise the dated file for --day.

    Args:
        inputstate: Program state with CLI options

    Returns:
        ProgramState with added fields:
            - inputSourceFile: Resolved todo file path
            - outputFile: Path of the rendered output
            - envOK: True if the todo file exists

    Exits:
        1 if the todo file does not exist
    """
    state = inputstate.copy()

    LOG("Checking environment...", level=2)

    if state.inputFile:
        file_name = appsettings.namedFile_name(state.inputFile)
    else:
        file_name = appsettings.dayFile_name(state.day)

    input_file = state.inputdir / file_name
    if not input_file.exists():
        print(f"Error: Todo file not found: {input_file}", file=sys.stderr)
        state.envOK = False
        sys.exit(1)

    state.inputSourceFile = input_file
    LOG(f"Input file: {input_file}", level=2)

    state.outputdir.mkdir(parents=True, exist_ok=True)
    state.outputFile = state.outputdir / f"{input_file.stem}{FORMAT_SUFFIXES[state.format]}"
    LOG(f"Output file: {state.outputFile}", level=2)

    state.envOK = True
    return state


def source_parse(inputstate: ProgramState) -> ProgramState:
    """
    Read the whole todo file, then tokenize and parse it.

    Parsing is skipped for formats that only show the source, unless a
    link is to be opened.

    Args:
        inputstate: Program state with inputSourceFile set

    Returns:
        ProgramState with added fields:
            - source: File text
            - document: Parsed File (None when parsing was skipped)

    Exits:
        1 if the file cannot be read or does not parse
    """
    state = inputstate.copy()

    LOG("Reading todo file...", level=1)

    try:
        state.source = state.inputSourceFile.read_text(encoding="utf-8")
        LOG(f"Read {len(state.source)} characters from {state.inputSourceFile.name}", level=2)
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error reading todo file: {e}", file=sys.stderr)
        sys.exit(1)

    if state.format in SOURCE_FORMATS and state.openLink is None:
        return state

    LOG("Parsing todo file...", level=1)
    try:
        state.document = Parser(state.todoConfig).parse(tokens_lex(state.source))
        LOG(f"Parsed {len(state.document.headings)} headings", level=2)
    except ParserError as e:
        print(f"Parse error: {e}", file=sys.stderr)
        sys.exit(1)
    return state


def document_render(inputstate: ProgramState) -> ProgramState:
    """
    Render the document in the requested format and write it out.

    Args:
        inputstate: Program state with source (and document) set

    Returns:
        ProgramState with added field:
            - rendered: Rendered text (also printed to stdout)
    """
    state = inputstate.copy()

    LOG(f"Rendering as {state.format}...", level=1)

    if state.format == "show":
        state.rendered = document_print(state.document, state.todoConfig, width=appsettings.wrap_width)
    elif state.format == "raw":
        state.rendered = document_toJSON(state.document) + "\n"
    elif state.format == "eww":
        state.rendered = ewwTodos_toJSON(
            state.document,
            state.todoConfig,
            appsettings.link_command,
            inputdir=state.inputdir,
            outputdir=state.outputdir,
        ) + "\n"
    elif state.format == "tokens":
        state.rendered = "".join(f"{token!r}\n" for token in tokens_lex(state.source))
    elif state.format == "links":
        state.rendered = "".join(f"{line}\n" for line in links_list(state.document))
    elif state.format == "highlight":
        state.rendered = source_highlight(state.source)

    state.outputFile.write_text(state.rendered, encoding="utf-8")
    LOG(f"Wrote {len(state.rendered)} characters to {state.outputFile}", level=2)
    print(state.rendered, end="")
    return state


def link_open(inputstate: ProgramState) -> ProgramState:
    """
    Open the link selected with --openLink.

    A bad index or failing handler is reported and the run continues.

    Args:
        inputstate: Program state with document set

    Returns:
        ProgramState with added field:
            - linkOpened: True if the handler ran
    """
    state = inputstate.copy()
    if state.openLink is None:
        return state

    links = state.document.links()
    if not 0 <= state.openLink < len(links):
        print(f"Error: Link index {state.openLink} is out of range ({len(links)} links)", file=sys.stderr)
        return state

    link = links[state.openLink]
    LOG(f"Opening link '{link.name}'", level=1)
    try:
        HandlerRegistry.fromConfig(state.todoConfig).dispatch(link.handler, link.path)
        state.linkOpened = True
    except HandlerDispatchError as e:
        print(f"Error: {e}", file=sys.stderr)
    return state


def linkRaw_open(inputstate: ProgramState) -> ProgramState:
    """
    Dispatch --openLinkRaw HANDLER PATH without reading a todo file.

    Exits:
        1 if the handler is unknown or fails
    """
    state = inputstate.copy()
    handler, path = state.openLinkRaw

    try:
        HandlerRegistry.fromConfig(state.todoConfig).dispatch(handler, path)
        state.linkOpened = True
    except HandlerDispatchError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    return state


def config_dump(inputstate: ProgramState) -> ProgramState:
    """
    Write the effective todo config as JSON, without reading a todo file.

    Args:
        inputstate: Program state with todoConfig loaded

    Returns:
        ProgramState with added fields:
            - outputFile: outputdir/config.json
            - rendered: Config JSON (also printed to stdout)
    """
    state = inputstate.copy()

    state.outputdir.mkdir(parents=True, exist_ok=True)
    state.outputFile = state.outputdir / f"config{FORMAT_SUFFIXES['config']}"
    state.rendered = state.todoConfig.model_dump_json(indent=2) + "\n"

    state.outputFile.write_text(state.rendered, encoding="utf-8")
    LOG(f"Wrote config to {state.outputFile}", level=2)
    print(state.rendered, end="")
    return state


def results_report(inputstate: ProgramState) -> ProgramState:
    """
    Summarize the run.

    Args:
        inputstate: Program state after rendering

    Returns:
        ProgramState unchanged (terminal pipeline stage)
    """
    state: ProgramState = inputstate.copy()

    LOG("✓ Render complete", level=1)
    LOG(f"  Input:  {state.inputSourceFile}", level=1)
    LOG(f"  Output: {state.outputFile}", level=1)
    if state.document is not None:
        LOG(f"  Todos:  {len(state.document.todos())}", level=1)
    return state


@chris_plugin(
    parser=parser,
    title="todofile - Renderer for daily plain-text todo files",
    category="Utility",
    min_memory_limit="100Mi",
    min_cpu_limit="500m",
)
def main(options: Namespace, inputdir: Path, outputdir: Path):
    """
    Main entry point - render one todo file, dump the config, or dispatch a raw link.

    Pipelines:
        --openLinkRaw:   config_load → linkRaw_open
        --format config: config_load → config_dump
        otherwise:       config_load → env_check → source_parse →
                         document_render → link_open → results_report

    Args:
        options: CLI arguments from argparse
        inputdir: Directory containing .todo files
        outputdir: Directory the rendering is written to

    Note:
        This function is wrapped by @chris_plugin which handles CLI
        argument parsing and invokes this function with parsed values.
    """
    state: ProgramState = ProgramState.state_createFromNamespace(
        options=options, inputdir=inputdir, outputdir=outputdir
    )

    state_connectToLogger(state)

    if state.format == "config":
        pipeline(state, config_load, config_dump)
        return

    if state.openLinkRaw:
        pipeline(state, config_load, linkRaw_open)
        return

    pipeline(state, config_load, env_check, source_parse, document_render, link_open, results_report)


if __name__ == "__main__":
    main()  # type: ignore  # @chris_plugin decorator transforms signature
