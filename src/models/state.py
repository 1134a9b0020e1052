"""
Program state model and pipeline helper

Defines ProgramState dataclass for the functional pipeline pattern and
the pipeline() helper for composing transformation stages.
"""

import dataclasses
from functools import reduce
from pathlib import Path
from argparse import Namespace
from typing import Optional, Type, TypeVar, List, Callable, TYPE_CHECKING
from dataclasses import dataclass, field

if TYPE_CHECKING:
    from ..config.user import TodoConfig
    from .document import File


PS = TypeVar("PS", bound="ProgramState")


@dataclass
class ProgramState:
    """
    Central state container for the render pipeline (state bus pattern).

    Pipeline stages and their state additions:
        - Initial: inputdir, outputdir, verbosity, inputFile, day, format,
          configFile, openLink, openLinkRaw
        - config_load: todoConfig
        - env_check: inputSourceFile, outputFile, envOK
        - source_parse: source, document
        - document_render: rendered
        - link_open: linkOpened
        - config_dump: outputFile, rendered (replaces env_check onwards)
        - results_report: (no additions, terminal stage)

    Attributes:
        inputdir: Directory holding the .todo files
        outputdir: Directory the rendering is written to
        verbosity: Logging verbosity level (1-3)
        inputFile: Todo file name (extension optional), or "" to use day
        day: Relative day selector ("y", "t", "tmr")
        format: Output format (show, raw, eww, tokens, links, highlight)
        configFile: User config path override
        openLink: Index of the link to open after parsing
        openLinkRaw: [handler, path] to dispatch without reading a file
        todoConfig: Loaded user config
        envOK: Environment validation passed
        inputSourceFile: Resolved path of the todo file
        outputFile: Path the rendering is written to
        source: Full text of the todo file
        document: Parsed File tree
        rendered: Rendered output text
        linkOpened: A link was dispatched successfully
    """

    # CLI arguments
    inputdir: Optional[Path] = field(default=None)
    outputdir: Optional[Path] = field(default=None)
    verbosity: int = field(default=1)
    inputFile: str = field(default="")
    day: str = field(default="t")
    format: str = field(default="show")
    configFile: Optional[str] = field(default=None)
    openLink: Optional[int] = field(default=None)
    openLinkRaw: Optional[List[str]] = field(default=None)

    # Pipeline state
    todoConfig: Optional["TodoConfig"] = field(default=None)
    envOK: bool = field(default=False)
    inputSourceFile: Path = field(default=Path("/"))
    outputFile: Path = field(default=Path("/"))
    source: str = field(default="")
    document: Optional["File"] = field(default=None)
    rendered: str = field(default="")
    linkOpened: bool = field(default=False)

    @classmethod
    def state_createFromNamespace(
        cls: Type["ProgramState"], options: Namespace, inputdir: Path, outputdir: Path
    ) -> "ProgramState":
        """
        Create ProgramState from argparse Namespace and directory paths.

        Args:
            options: Parsed CLI arguments
            inputdir: Directory containing todo files
            outputdir: Directory for rendered output

        Returns:
            ProgramState with all known CLI options as attributes
        """
        options_dict = vars(options)
        valid_fields = {f.name for f in dataclasses.fields(cls)}
        filtered_options = {k: v for k, v in options_dict.items() if k in valid_fields}
        merged_args = {**filtered_options, "inputdir": inputdir, "outputdir": outputdir}
        return cls(**merged_args)

    def copy(self: PS) -> PS:
        """
        Creates a shallow copy of the ProgramState instance.

        Returns:
            A new ProgramState instance.
        """
        return type(self)(**self.__dict__)


def pipeline(
    initial_state: ProgramState, *stages: Callable[[ProgramState], ProgramState]
) -> ProgramState:
    """
    Execute a functional pipeline of state transformations.

    Each stage is a function (ProgramState) -> ProgramState that receives
    the output of the previous stage and returns a new state.

    Example:
        final_state = pipeline(state, config_load, env_check, source_parse)

    runs config_load, then env_check, then source_parse, read
    left to right instead of inside-out.
    """
    return reduce(lambda state, stage: stage(state), stages, initial_state)
