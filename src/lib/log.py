"""
Centralized logging using Loguru with context-aware verbosity.

LOG() respects the verbosity of the ProgramState bound to the current
context, so the tokenizer and parser can trace their work without a state
argument.

Verbosity levels:
    1 = pipeline progress (default)
    2 = resolved paths, render sizes, link dispatch
    3 = tokenizer and parser traces

Usage:
    from lib.log import LOG, state_connectToLogger

    state_connectToLogger(state)
    LOG("Rendering...", level=1)
    LOG("Tokenized 12 lines into 40 tokens", level=3)

With no state bound (library use, tests), LOG() is silent.
"""

from loguru import logger
from typing import Any, Optional
from contextvars import ContextVar
import sys

# Context variable holding the ProgramState of the current invocation
_program_state: ContextVar[Optional[Any]] = ContextVar('program_state', default=None)

logger_format = (
    "<green>{time:HH:mm:ss}</green> │ "
    "<level>{level: <5}</level> │ "
    "<cyan>{module: <10}</cyan>:"
    "<cyan>{function: <16}</cyan> ║ "
    "<level>{message}</level>"
)

logger.remove()
logger.add(sys.stderr, format=logger_format, level="DEBUG")


def state_connectToLogger(state: Any) -> None:
    """
    Bind a ProgramState to the logging context.

    Args:
        state: Object with a verbosity attribute (usually ProgramState)
    """
    _program_state.set(state)


def LOG(message: str, level: int = 1, **kwargs: Any) -> None:
    """
    Log message if the bound state's verbosity allows.

    Args:
        message: Log message to display
        level: Minimum verbosity level required (1-3)
        **kwargs: Additional loguru metadata
    """
    state = _program_state.get()

    if state and hasattr(state, 'verbosity') and state.verbosity >= level:
        logger.opt(depth=1).debug(message, **kwargs)
