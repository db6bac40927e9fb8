"""Inspect commands for the families of a model."""

from pathlib import Path

import typer

from ...errors import MissingFamilyError
from ..app import app, console, get_json_mode
from ..utils import Report, load_model_or_report, yes_no


@app.command("families")
def families_command(
    model_file: Path = typer.Argument(..., help="Model file (.yaml or .json)"),
):
    """List the families of a model."""
    report = Report(console=console, json_mode=get_json_mode())

    model = load_model_or_report(model_file, report)
    if model is None:
        raise typer.Exit(report.finish())

    rows = []
    for family in model.families.values():
        rows.append(
            [
                family.code,
                family.get_label(),
                family.parent.code if family.parent else "",
                str(len(family.get_attributes())),
                yes_no(family.instantiable),
                yes_no(family.singleton),
            ]
        )
    report.table(
        "Families",
        ["Code", "Label", "Parent", "Attributes", "Instantiable", "Singleton"],
        rows,
    )
    raise typer.Exit(report.finish())


@app.command("show")
def show_command(
    model_file: Path = typer.Argument(..., help="Model file (.yaml or .json)"),
    family_code: str = typer.Argument(..., help="Family code"),
):
    """Show the resolved attributes of one family."""
    report = Report(console=console, json_mode=get_json_mode())

    model = load_model_or_report(model_file, report)
    if model is None:
        raise typer.Exit(report.finish())

    try:
        family = model.get_family(family_code)
    except MissingFamilyError as exc:
        report.error(
            str(exc),
            hint=f"Known families: {', '.join(model.families) or 'none'}",
        )
        raise typer.Exit(report.finish())

    identifier = family.attribute_as_identifier
    report.text(f"[bold]{family.get_label()}[/bold] ({family.code})")
    if family.parent:
        report.text(f"parent: {family.parent.code}")
    report.text(f"label attributes: {', '.join(a.code for a in family.attribute_as_label) or '-'}")
    report.text(f"identifier: {identifier.code if identifier else '-'}")
    report.text(f"matching codes: {', '.join(family.get_matching_codes())}")
    report.set_data("family", family.code)
    report.set_data("parent", family.parent.code if family.parent else None)
    report.set_data("attribute_as_label", [a.code for a in family.attribute_as_label])
    report.set_data("attribute_as_identifier", identifier.code if identifier else None)
    report.set_data("matching_codes", family.get_matching_codes())

    rows = []
    for attribute in family.get_attributes().values():
        rows.append(
            [
                attribute.code,
                attribute.type.code,
                yes_no(attribute.required),
                yes_no(attribute.unique),
                yes_no(attribute.collection),
                ", ".join(attribute.context_mask),
            ]
        )
    report.table(
        "Attributes",
        ["Code", "Type", "Required", "Unique", "Collection", "Context"],
        rows,
    )
    raise typer.Exit(report.finish())
