"""
Site Curve Report Example

Prints a short report for a few commercial species: their default curves,
a height-age table on each, and the site index of a measured stand, then
shows the error numbers returned by the legacy interface.

Usage:
    python examples/site_curve_report.py
"""

import math

from rich.console import Console
from rich.table import Table
from rich.panel import Panel

from pysindex import AgeType, ComputationError, EstimationMode, SiteIndexEngine
from pysindex import legacy
from pysindex.tables import age_at_height, height_age_table

console = Console()


def show_default_curves(engine):
    """List the default curve of each species."""
    console.print(Panel("[bold]Default Curves[/bold]"))

    table = Table()
    table.add_column("Species", style="bold")
    table.add_column("Name")
    table.add_column("Curve")
    table.add_column("Reference")
    table.add_column("Curves", justify="right")

    for species in ["FDC", "FDI", "HWC", "PLI", "SW", "AT"]:
        curve = engine.default_curve(species)
        definition = engine.curve(curve)
        table.add_row(
            species,
            engine.catalog.species_name(species),
            definition.key,
            definition.name,
            str(len(engine.curves_for_species(species))),
        )

    console.print(table)
    console.print()


def show_height_table(engine, species, site_indices=(15, 20, 25, 30)):
    """Height-age table on a species' default curve."""
    curve = engine.default_curve(species)
    console.print(Panel(f"[bold]{engine.curve_name(curve)} ({species})[/bold]"))

    heights = height_age_table(curve, site_indices, range(10, 110, 10), engine=engine)

    table = Table(title="Height (m) by breast-height age")
    table.add_column("Age", justify="center")
    for site_index in heights.columns:
        table.add_column(f"SI {site_index:g}", justify="right")

    for age, row in heights.iterrows():
        table.add_row(f"{age:g}", *("-" if math.isnan(value) else f"{value:.1f}" for value in row))

    console.print(table)

    heights = height_age_table(curve, site_indices, range(1, 151), engine=engine)
    for site_index in heights.columns:
        age = age_at_height(heights, site_index, 10.0)
        reached = "never" if age is None else f"{age:.1f} years"
        console.print(f"  SI {site_index:g}: 10 m at {reached}")
    console.print()


def show_measured_stand(engine, species="PLI", age=35.0, height=17.5):
    """Site index, years to breast height and total age of a measured stand."""
    console.print(Panel(f"[bold]Measured stand: {species}, {height:g} m at age {age:g}[/bold]"))

    curve = engine.default_curve(species)
    try:
        site_index = engine.height_to_index(curve, age, AgeType.BREAST, height,
                                            EstimationMode.DIRECT)
        y2bh = engine.si_y2bh_rounded(curve, site_index)
        total_age = engine.age_to_age(curve, age, AgeType.BREAST, AgeType.TOTAL, y2bh)
    except ComputationError as e:
        console.print(f"[red]{e}[/red]")
        return

    console.print(f"Site index: [green]{site_index:.2f} m[/green]")
    console.print(f"Years to breast height: {y2bh:g}")
    console.print(f"Total age: {total_age:g}")
    console.print()


def show_legacy_errors(engine):
    """Error numbers from the sentinel-returning interface."""
    console.print(Panel("[bold]Legacy error numbers[/bold]"))

    table = Table()
    table.add_column("Call")
    table.add_column("Result", justify="right")

    calls = [
        ("index_to_height, site index 1.0",
         legacy.index_to_height(engine.default_curve("SW"), 50, AgeType.BREAST, 1.0, 5.5, 0.5,
                                engine=engine)),
        ("index_to_age, unknown curve",
         legacy.index_to_age(9999, 10.0, AgeType.BREAST, 20.0, 5.5, engine=engine)),
        ("class_to_index, class 'X'",
         legacy.class_to_index("FDC", "X", engine=engine)),
        ("species_map, 'XYZ'",
         legacy.species_map("XYZ", engine=engine)),
    ]
    for label, result in calls:
        table.add_row(label, f"[yellow]{result:g}[/yellow]")

    console.print(table)
    console.print()


def main():
    console.print()
    console.rule("[bold blue]pysindex Site Curve Report[/bold blue]")
    console.print()

    engine = SiteIndexEngine()

    show_default_curves(engine)
    for species in ["FDC", "PLI"]:
        show_height_table(engine, species)
    show_measured_stand(engine)
    show_legacy_errors(engine)

    console.print("[dim]Done.[/dim]")


if __name__ == "__main__":
    main()
