from __future__ import annotations

import argparse
import shutil

from rich.console import Console
from rich.table import Table
from rich.text import Text

from .command_help import CommandHelp


class RichHelpFormatter(argparse.HelpFormatter):
    """
    Argparse help formatter that appends Rich-rendered examples, environment
    variables and tips to the standard help text.

    Colors are only emitted when the console is a terminal; piped help stays
    plain text.
    """

    command_help: CommandHelp | None = None

    def __init__(
        self,
        prog: str,
        indent_increment: int = 2,
        max_help_position: int = 30,
        width: int | None = None,
        console: Console | None = None,
    ) -> None:
        if width is None:
            terminal_size = shutil.get_terminal_size()
            width = min(terminal_size.columns, 120)  # Cap at 120 for readability

        super().__init__(
            prog=prog,
            indent_increment=indent_increment,
            max_help_position=max_help_position,
            width=width,
        )
        self.console = console or Console(width=width)

    def format_help(self) -> str:
        standard_help = super().format_help()
        if self.command_help is None:
            return standard_help

        parts = [standard_help.rstrip("\n"), ""]
        if self.command_help.examples:
            parts.append(self._render_examples())
        if self.command_help.env_vars:
            parts.append(self._render_env_vars())
        if self.command_help.tips:
            parts.append(self._render_tips())
        return "\n".join(parts)

    def _render_examples(self) -> str:
        assert self.command_help is not None
        with self.console.capture() as capture:
            self.console.print(Text("Examples:", style="bold bright_cyan"))
            for index, (description, command) in enumerate(self.command_help.examples, 1):
                desc_text = Text()
                desc_text.append(f"  {index}. ", style="dim cyan")
                desc_text.append(description, style="bright_white")
                self.console.print(desc_text)
                self.console.print(f"     $ {command}", style="bright_yellow", markup=False, highlight=False)
        return capture.get()

    def _render_env_vars(self) -> str:
        assert self.command_help is not None
        with self.console.capture() as capture:
            self.console.print(Text("Environment Variables:", style="bold bright_cyan"))
            table = Table(show_header=False, box=None, padding=(0, 2))
            table.add_column("Variable", style="bright_green bold", no_wrap=True)
            table.add_column("Description", style="bright_white")
            for var_name, description in self.command_help.env_vars:
                table.add_row(var_name, description)
            self.console.print(table)
        return capture.get()

    def _render_tips(self) -> str:
        assert self.command_help is not None
        with self.console.capture() as capture:
            self.console.print(Text("Tips:", style="bold bright_cyan"))
            for tip in self.command_help.tips:
                tip_text = Text()
                tip_text.append("  * ", style="bright_yellow")
                tip_text.append(tip, style="bright_white")
                self.console.print(tip_text)
        return capture.get()


def formatter_for(command_help: CommandHelp) -> type[RichHelpFormatter]:
    """Return a RichHelpFormatter subclass bound to *command_help*."""
    return type("CommandHelpFormatter", (RichHelpFormatter,), {"command_help": command_help})
