"""
Terminal presentation: Nord theme, pyfiglet header and message helpers.
"""

import shutil
from typing import Iterable, List, Tuple

import pyfiglet
from prompt_toolkit import prompt as pt_prompt
from prompt_toolkit.styles import Style as PtStyle
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
)
from rich.style import Style
from rich.table import Table
from rich.text import Text
from rich.theme import Theme

from debian_setup import __version__
from debian_setup.errors import StepResult, StepStatus

APP_NAME: str = "Debian Setup"
APP_SUBTITLE: str = "Workstation Provisioning"


class NordColors:
    """Nord color palette for consistent styling."""

    POLAR_NIGHT_4: str = "#4C566A"
    SNOW_STORM_1: str = "#D8DEE9"
    SNOW_STORM_2: str = "#E5E9F0"
    FROST_1: str = "#8FBCBB"
    FROST_2: str = "#88C0D0"
    FROST_3: str = "#81A1C1"
    FROST_4: str = "#5E81AC"
    RED: str = "#BF616A"
    YELLOW: str = "#EBCB8B"
    GREEN: str = "#A3BE8C"
    PURPLE: str = "#B48EAD"


nord_theme = Theme(
    {
        "info": f"{NordColors.FROST_2}",
        "warning": f"{NordColors.YELLOW}",
        "error": f"{NordColors.RED}",
        "success": f"{NordColors.GREEN}",
        "debug": f"{NordColors.POLAR_NIGHT_4}",
        "header": f"bold {NordColors.FROST_1}",
        "title": f"bold {NordColors.FROST_3}",
        "progress": f"{NordColors.FROST_2}",
        "panel.border": f"{NordColors.FROST_4}",
    }
)

console = Console(theme=nord_theme, highlight=False)


def create_header(title: str = APP_NAME) -> Panel:
    """
    Generate an ASCII art header with gradient styling using Pyfiglet.

    Args:
        title: The title text to display in the ASCII art

    Returns:
        A Rich Panel containing the styled ASCII art header
    """
    term_width = shutil.get_terminal_size().columns
    adjusted_width = min(term_width - 4, 80)

    fonts = ["slant", "big", "standard", "small"]
    ascii_art = ""
    for font in fonts:
        try:
            fig = pyfiglet.Figlet(font=font, width=adjusted_width)
            ascii_art = fig.renderText(title)
            if ascii_art.strip():
                break
        except pyfiglet.FontNotFound:
            continue

    ascii_lines = [line for line in ascii_art.splitlines() if line.strip()]
    colors = [
        NordColors.FROST_1,
        NordColors.FROST_2,
        NordColors.FROST_3,
        NordColors.FROST_4,
    ]

    styled_text = Text()
    for i, line in enumerate(ascii_lines):
        color = colors[i % len(colors)]
        styled_text.append(Text(line, style=Style(color=color, bold=True)))
        styled_text.append("\n")

    border_text = Text(
        "━" * (adjusted_width - 6), style=Style(color=NordColors.FROST_3)
    )

    content = Text()
    content.append(border_text)
    content.append("\n")
    content.append(styled_text)
    content.append(border_text)

    return Panel(
        content,
        border_style=Style(color=NordColors.FROST_1),
        padding=(1, 2),
        title=f"[bold {NordColors.SNOW_STORM_2}]v{__version__}[/]",
        title_align="right",
        subtitle=f"[bold {NordColors.SNOW_STORM_1}]{APP_SUBTITLE}[/]",
        subtitle_align="center",
    )


def print_message(
    text: str, style: str = NordColors.FROST_2, prefix: str = "•"
) -> None:
    """Print a styled message with a prefix. ``text`` is printed literally."""
    console.print(f"[{style}]{prefix} {escape(text)}[/{style}]")


def print_success(message: str) -> None:
    print_message(message, NordColors.GREEN, "✓")


def print_warning(message: str) -> None:
    print_message(message, NordColors.YELLOW, "⚠")


def print_error(message: str) -> None:
    print_message(message, NordColors.RED, "✗")


def print_step(message: str) -> None:
    print_message(message, NordColors.FROST_2, "→")


def prompt_choice(message: str) -> str:
    """Read one line from the operator."""
    return pt_prompt(
        [("class:prompt", message)],
        style=PtStyle.from_dict({"prompt": f"bold {NordColors.PURPLE}"}),
    ).strip()


def item_progress() -> Progress:
    """Progress bar used when a step works through a list of items."""
    return Progress(
        SpinnerColumn(style=f"bold {NordColors.FROST_1}"),
        TextColumn(f"[bold {NordColors.FROST_2}]{{task.description}}"),
        BarColumn(complete_style=f"{NordColors.GREEN}"),
        TaskProgressColumn(),
        console=console,
    )


def menu_table(options: Iterable[Tuple[str, str]]) -> Table:
    table = Table(
        show_header=True,
        header_style=f"bold {NordColors.FROST_3}",
        box=box.ROUNDED,
        expand=True,
    )
    table.add_column("Option", style="bold", width=8)
    table.add_column("Description", style="bold")
    for option, description in options:
        table.add_row(option, description)
    return table


def print_results(results: List[StepResult]) -> None:
    """Display a summary of the steps that ran."""
    table = Table(
        title="Setup Status Report",
        title_style=f"bold {NordColors.FROST_1}",
        border_style=f"{NordColors.FROST_3}",
        box=box.ROUNDED,
        show_lines=True,
    )
    table.add_column("Step", style=f"bold {NordColors.FROST_2}")
    table.add_column("Status", style="bold")
    table.add_column("Message")

    status_styles = {
        StepStatus.SUCCESS: NordColors.GREEN,
        StepStatus.SKIPPED: NordColors.YELLOW,
        StepStatus.FAILED: NordColors.RED,
    }
    for result in results:
        style = status_styles.get(result.status, NordColors.FROST_2)
        table.add_row(
            result.name.replace("_", " ").title(),
            f"[{style}]{result.status.value.upper()}[/{style}]",
            Text(result.message),
        )

    console.print(Panel(table, border_style=f"{NordColors.FROST_1}"))
