"""Output helpers shared by the CLI commands.

A command builds a Report, feeds it messages and tables, and exits with
whatever finish() returns:

    report = Report(console=console, json_mode=get_json_mode())
    report.success("Model valid", families=3)
    report.table("Families", ["Code", "Parent"], [["article", ""], ["news", "article"]])
    raise typer.Exit(report.finish())

With --json nothing is printed until finish(), which dumps one document
holding the status, the errors, the data set along the way and the exit
code. Otherwise everything goes straight to the rich console.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, PrivateAttr
from rich.console import Console
from rich.table import Table

from ..errors import ConfigurationError
from ..loader import EAVModel, load_model


class ExitCode:
    """Process exit codes.

        0 = Success
        1 = Invalid model or unknown family
        3 = Model file not found
    """

    SUCCESS = 0
    VALIDATION_ERROR = 1
    FILE_NOT_FOUND = 3


class Report(BaseModel):
    """Collects what a command has to say, as rich text or as JSON."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    console: Console
    json_mode: bool = False

    _document: dict[str, Any] = PrivateAttr(default_factory=dict)
    _errors: list[dict[str, str]] = PrivateAttr(default_factory=list)
    _exit_code: int = PrivateAttr(default=ExitCode.SUCCESS)

    @property
    def exit_code(self) -> int:
        return self._exit_code

    def success(self, message: str, **data: Any) -> None:
        if self.json_mode:
            self._document.update(data)
        else:
            self.console.print(f"[green]✓[/green] {message}")

    def error(
        self,
        message: str,
        *,
        hint: str | None = None,
        exit_code: int = ExitCode.VALIDATION_ERROR,
    ) -> None:
        """Record an error; the last one decides the exit code."""
        self._exit_code = exit_code
        if self.json_mode:
            entry = {"message": message}
            if hint:
                entry["hint"] = hint
            self._errors.append(entry)
            return
        self.console.print(f"[red]✗[/red] {message}")
        if hint:
            self.console.print(f"  [dim]{hint}[/dim]")

    def text(self, message: str) -> None:
        """Human-only line; dropped in JSON mode."""
        if not self.json_mode:
            self.console.print(message)

    def table(self, title: str, columns: list[str], rows: list[list[str]]) -> None:
        """Rich table, or a list of column → cell dicts under the snake_cased title."""
        if self.json_mode:
            key = title.lower().replace(" ", "_")
            self._document[key] = [dict(zip(columns, row)) for row in rows]
            return
        table = Table(title=title, header_style="bold")
        for column in columns:
            table.add_column(column)
        for row in rows:
            table.add_row(*row)
        self.console.print(table)

    def set_data(self, key: str, value: Any) -> None:
        self._document[key] = value

    def finish(self) -> int:
        """Print the JSON document if needed and return the exit code."""
        if self.json_mode:
            document = {
                "status": "error" if self._errors else "success",
                "errors": self._errors,
                **self._document,
                "exit_code": self._exit_code,
            }
            print(json.dumps(document, indent=2, default=str))
        return self._exit_code


def load_model_or_report(model_file: Path, report: Report) -> EAVModel | None:
    """Build the model in model_file, or record why it can't be built."""
    if not model_file.exists():
        report.error(
            f"File not found: {model_file}",
            hint=f"Looked for {model_file.absolute()}",
            exit_code=ExitCode.FILE_NOT_FOUND,
        )
        return None
    try:
        return load_model(model_file)
    except ConfigurationError as exc:
        report.error(f"Invalid model: {exc}")
        return None


def yes_no(flag: bool) -> str:
    return "yes" if flag else "no"
