# output.py - tools for managing terminal output

from __future__ import annotations

from typing            import Literal

from rich              import box
from rich.panel        import Panel

from symbolic_expr.env import environment

#
# Rendered Output
#

def in_panel(
        s: str,
        box=box.SQUARE,
        title: str | None = None,
        title_align: Literal['left', 'center', 'right'] = 'center',
        subtitle: str | None = None,
        subtitle_align: Literal['left', 'center', 'right'] = 'center',
) -> str | Panel:
    if environment.ascii_only:
        return s
    return Panel(
        s,
        expand=False,
        box=box,
        title=title,
        title_align=title_align,
        subtitle=subtitle,
        subtitle_align=subtitle_align,
    )

def show(x) -> str:
    "Renders an expression (or anything rich can print) to a string via the environment console."
    if environment.ascii_only:
        return str(x)
    return environment.console_str(x)
