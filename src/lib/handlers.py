"""
Link handler registry

Maps handler names (the 'handler' in |name[handler:path]|) to callables
that open a path. The parser only needs the names, to mark links as
known or unknown; dispatching happens later, when a link is activated.

Handlers from the user config are shell command templates:
    handlers:
      open: "xdg-open {path}"
      mpv: "mpv --no-terminal {path}"
"""

import shlex
import subprocess
from typing import Callable, Dict, FrozenSet, Optional, Union

from ..config.user import TodoConfig
from ..models.tokens import Handler
from .errors import HandlerDispatchError
from .log import LOG

HandlerFn = Callable[[str], None]


def command_handler(template: str) -> HandlerFn:
    """
    Build a handler that runs a shell command template

    Args:
        template: Command with a {path} placeholder; the path is shell-quoted

    Returns:
        Handler callable raising ValueError for a malformed template and
        CalledProcessError if the command fails
    """

    def run(path: str) -> None:
        try:
            command = template.format(path=shlex.quote(path))
            args = shlex.split(command)
        except (KeyError, IndexError) as e:
            raise ValueError(f"invalid command template {template!r}: {e}") from e
        LOG(f"Running link command: {command}", level=2)
        subprocess.run(args, check=True)

    return run


class HandlerRegistry:
    """
    Registry of link handlers

    Attributes:
        handlers: Handler name -> callable taking the link path
    """

    def __init__(self, handlers: Optional[Dict[str, HandlerFn]] = None) -> None:
        self.handlers: Dict[str, HandlerFn] = dict(handlers or {})

    @classmethod
    def fromConfig(cls, config: TodoConfig) -> "HandlerRegistry":
        """Registry with one command handler per configured template"""
        registry = cls()
        for name, template in config.handlers.items():
            registry.register(name, command_handler(template))
        return registry

    def register(self, name: str, handler: HandlerFn) -> None:
        """Register (or replace) a handler"""
        self.handlers[name] = handler

    def known(self, name: str) -> bool:
        return name in self.handlers

    def names(self) -> FrozenSet[str]:
        return frozenset(self.handlers)

    def dispatch(self, handler: Union[Handler, str], path: str) -> None:
        """
        Open a path with the named handler

        Args:
            handler: Handler reference from a Link, or a bare name
            path: Link path passed to the handler

        Raises:
            HandlerDispatchError: If the handler is unknown or fails
        """
        name = handler.name if isinstance(handler, Handler) else handler
        fn = self.handlers.get(name)
        if fn is None:
            raise HandlerDispatchError(name, path)

        LOG(f"Opening '{path}' with handler '{name}'", level=2)
        try:
            fn(path)
        except (OSError, ValueError, subprocess.SubprocessError) as e:
            raise HandlerDispatchError(name, path, reason=str(e)) from e
