"""Validate command for model files."""

from pathlib import Path

import typer

from ..app import app, console, get_json_mode
from ..utils import Report, load_model_or_report


@app.command("validate")
def validate_command(
    model_file: Path = typer.Argument(..., help="Model file to validate (.yaml or .json)"),
):
    """
    Build a model file and report whether it is valid.

    EXIT CODES:
        0 = Success (valid model)
        1 = Validation error (invalid model)
        3 = File not found

    EXAMPLES:
        eavmodel validate model.yaml
        eavmodel --json validate model.yaml
    """
    report = Report(console=console, json_mode=get_json_mode())

    model = load_model_or_report(model_file, report)
    if model is not None:
        report.success(
            f"Model valid: {len(model.families)} families, "
            f"{len(model.attributes)} global attributes",
            families=len(model.families),
            attributes=len(model.attributes),
        )

    raise typer.Exit(report.finish())
