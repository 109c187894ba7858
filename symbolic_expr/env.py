#
# A singleton environment for capturing global options.
#
# This controls the output formats of expressions that should print in
# nice or rich ways in a terminal, and the level used when
# the library's logging is set up. It is not thread safe.
#
from __future__ import annotations

from dataclasses  import dataclass, field

from rich.console import Console
from rich.theme   import Theme

bright_theme = Theme({
    "repr.number": "#3333cc",
    "repr.str": "#330066",
    "repr.attrib_name": "#330000",
    "repr.attrib_value": "#000033",
    "logging.level.debug": "#336633",
    "logging.level.warning": "#996600",
})

dark_theme = Theme({
    "repr.number": "#cccc33",
    "repr.str": "#ccff99",
    "repr.attrib_name": "#ccffff",
    "repr.attrib_value": "#ffffcc",
    "logging.level.debug": "#99cc99",
    "logging.level.warning": "#ffcc66",
})

LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


@dataclass
class Environment:
    """Options governing output and logging, globally available.
    """
    ascii_only: bool = False
    dark_mode: bool = False
    log_level: str = 'WARNING'
    console: Console = field(default_factory=lambda: Console(highlight=True, theme=bright_theme))

    def on_ascii_only(self) -> None:
        "Require ASCII-only output, no rich text or panels."
        self.ascii_only = True

    def off_ascii_only(self) -> None:
        "Allow rich output"
        self.ascii_only = False

    def on_dark_mode(self) -> None:
        "Changes text color to suit dark colored terminals"
        self.dark_mode = True
        self.console.push_theme(dark_theme)

    def on_bright_mode(self) -> None:
        "Text color default suited for light colored terminals"
        self.dark_mode = False
        self.console.push_theme(bright_theme)

    def set_log_level(self, level: str) -> None:
        "Sets the level used by logs.setup_logging; takes effect on the next setup."
        level = level.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f'Unknown log level {level}, expected one of {", ".join(LOG_LEVELS)}')
        self.log_level = level

    def console_str(self, rich_str) -> str:
        with self.console.capture() as capture:
            self.console.print(rich_str)
        return capture.get()

environment = Environment()
