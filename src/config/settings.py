"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use TODOFILE_ prefix (e.g., TODOFILE_WRAP_WIDTH=100).

Settings can also be loaded from a .env file in the project root.

These are settings of the program itself. The user's todo preferences
(state aliases, bullet point, link handlers) live in the YAML config file
named by config_file, see config/user.py.
"""

from datetime import date, timedelta
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# Relative day selectors accepted on the command line
DAY_OFFSETS = {
    "y": -1,    # yesterday
    "t": 0,     # today
    "tmr": 1,   # tomorrow
}


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use TODOFILE_ prefix.

    Examples:
        TODOFILE_CONFIG_FILE=~/dotfiles/todo.yaml
        TODOFILE_WRAP_WIDTH=100
        TODOFILE_DATE_FORMAT=%Y-%m-%d
    """

    model_config = SettingsConfigDict(
        env_prefix="TODOFILE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    config_file: str = Field(
        default="~/.config/todo/config.yaml",
        description="YAML file with state aliases, bullet point and link handlers",
    )

    wrap_width: Optional[int] = Field(
        default=None,
        description="Width paragraphs are wrapped to; unset means the terminal width",
    )

    file_extension: str = Field(
        default=".todo",
        description="Extension of todo files inside the input directory",
    )

    date_format: str = Field(
        default="%d%m%Y",
        description="strftime format of dated todo file names",
    )

    link_command: str = Field(
        default="todofile {inputdir} {outputdir} --openLinkRaw {handler} {path}",
        description="Command a widget link runs when clicked; {handler}, {path}, {inputdir} and {outputdir} are substituted shell-quoted",
    )

    def dayFile_name(self, day: str, today: Optional[date] = None) -> str:
        """
        File name of the todo file for a relative day.

        Args:
            day: One of DAY_OFFSETS ("y", "t", "tmr")
            today: Reference date (defaults to the current date)

        Returns:
            File name such as "15102026.todo"

        Example:
            >>> settings = AppSettings()
            >>> settings.dayFile_name("tmr", today=date(2026, 10, 15))
            '16102026.todo'
        """
        reference = today or date.today()
        target = reference + timedelta(days=DAY_OFFSETS[day])
        return f"{target.strftime(self.date_format)}{self.file_extension}"

    def namedFile_name(self, name: str) -> str:
        """File name for an explicit name, adding the extension when missing"""
        if name.endswith(self.file_extension):
            return name
        return f"{name}{self.file_extension}"


# Singleton instance - import this in your code
appsettings = AppSettings()
