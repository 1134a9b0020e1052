"""
User todo configuration

Loaded once per invocation from a YAML file and passed read-only into the
parser and printer. Nothing in the core reads it from global state.

Example config.yaml:
    bullet_point: "*"
    todo_state_ops:
      default: TODO
      brackets: true
    todo_state:
      x: DONE
      "~": WAITING
    handlers:
      open: "xdg-open {path}"
"""

import shlex
from pathlib import Path
from typing import Any, Dict, FrozenSet, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator


class ConfigError(Exception):
    """Raised when the user config cannot be read or validated"""
    pass


class TodoStateOps(BaseModel):
    """
    How todo states are printed

    Attributes:
        default: State text used when a todo has empty brackets
        brackets: Print states as "[state]" (True) or bare "state" (False).
                  On by default so printed todos parse back as todos; bare
                  states read back as plain text.
    """
    default: str = " "
    brackets: bool = True


class TodoConfig(BaseModel):
    """
    User preferences consumed by the parser, printer and exports

    Attributes:
        bullet_point: Marker printed in front of bullets (default: source marker)
        todo_state_ops: Default state and bracket policy (None: " " and brackets)
        todo_state: Alias table, raw bracket text -> display text
        handlers: Link handler name -> shell command template with {path}
    """
    model_config = ConfigDict(frozen=True)

    bullet_point: Optional[str] = None
    todo_state_ops: Optional[TodoStateOps] = None
    todo_state: Dict[str, str] = Field(default_factory=dict)
    handlers: Dict[str, str] = Field(default_factory=dict)

    @field_validator("handlers")
    @classmethod
    def handlers_check(cls, handlers: Dict[str, str]) -> Dict[str, str]:
        """Every template must format with {path} and split into a command"""
        for name, template in handlers.items():
            try:
                args = shlex.split(template.format(path="PATH"))
            except (KeyError, IndexError, ValueError) as e:
                raise ValueError(f"handler '{name}' has an invalid command template {template!r}: {e}")
            if not args:
                raise ValueError(f"handler '{name}' has an empty command template")
        return handlers

    @property
    def handler_names(self) -> FrozenSet[str]:
        """Names that classify a link handler as known"""
        return frozenset(self.handlers)

    def stateOps_get(self) -> TodoStateOps:
        """Configured state policy, or the defaults"""
        return self.todo_state_ops or TodoStateOps()


def config_fromDict(data: Dict[str, Any]) -> TodoConfig:
    """
    Validate a config mapping.

    Raises:
        ConfigError: If a field has the wrong shape
    """
    try:
        return TodoConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid todo config: {e}")


def config_load(path: Union[str, Path, None]) -> TodoConfig:
    """
    Load the user config from a YAML file.

    A missing file (or no path) yields the default config; an empty file
    is treated the same way.

    Args:
        path: Config file path ("~" is expanded)

    Returns:
        Validated TodoConfig

    Raises:
        ConfigError: If the file is not valid YAML, not a mapping, or has
                     invalid fields
    """
    if path is None:
        return TodoConfig()

    config_path = Path(path).expanduser()
    if not config_path.exists():
        return TodoConfig()

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            data: Any = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse {config_path}: {e}")
    except OSError as e:
        raise ConfigError(f"Failed to read {config_path}: {e}")

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"{config_path} must contain a mapping, got {type(data).__name__}")

    return config_fromDict(data)
