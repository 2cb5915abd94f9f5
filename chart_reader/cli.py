# chart_reader/cli.py
import json
import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table
from rich import box

from .annotate import annotate_outcomes
from .classify import classify
from .config import load_settings
from .errors import TotalPipelineFailure
from .loader import load_image
from .logging_config import setup_logging, logging_sink
from .ocr import TesseractOcr
from .pipeline import run_document
from .util import slugify


app = typer.Typer(add_completion=False, help="Utility bill → usage chart data")
console = Console()

logger = logging.getLogger("chart_reader.cli")


def _chart_table(chart) -> Table:
    years = [u.year for u in chart.data[0].usage] if chart.data else []
    table = Table(title=f"{chart.title} ({chart.unit})", box=box.SIMPLE_HEAVY)
    table.add_column("Month")
    for y in years:
        table.add_column(y, justify="right")
    for m in chart.data:
        table.add_row(m.month, *[f"{u.value:g}" for u in m.usage])
    return table


@app.command("extract")
def extract(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Bill image or PDF"),
    page: int = typer.Option(0, help="0-based page for PDFs"),
    json_out: Path = typer.Option(None, help="Write the charts as JSON here"),
    annotate: bool = typer.Option(False, help="Save a debug overlay PNG to OUTPUT_DIR"),
    log_level: str = typer.Option(None, help="Override LOG_LEVEL"),
):
    s = load_settings()
    setup_logging(log_level or s.log_level)
    logger.info("Extracting usage charts from %s (page %d)", path, page)

    try:
        img = load_image(str(path), page=page, dpi=s.pdf_dpi)
    except TotalPipelineFailure as e:
        console.print(f"[red]Could not load {path}: {e}[/red]")
        raise typer.Exit(code=1)

    console.print("[cyan]Running OCR and chart detection...[/cyan]")
    outcomes, charts = run_document(img, settings=s, sink=logging_sink(logger))

    for o in outcomes:
        if not o.ok:
            console.print(f"[yellow]Chart {o.candidate.id} skipped: {o.error}[/yellow]")
    if not charts:
        console.print("[yellow]No usage charts found.[/yellow]")
    for chart in charts:
        console.print(_chart_table(chart))

    if json_out:
        json_out.parent.mkdir(parents=True, exist_ok=True)
        json_out.write_text(json.dumps([c.to_public() for c in charts], indent=2), encoding="utf-8")
        console.print(f"[green]Wrote {json_out}[/green]")

    if annotate:
        out_png = Path(s.output_dir) / f"{slugify(path.stem)}_p{page}_charts.png"
        annotate_outcomes(img, outcomes, out_png.as_posix())
        console.print(f"[green]Wrote {out_png}[/green]")


@app.command("words")
def words(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Bill image or PDF"),
    page: int = typer.Option(0, help="0-based page for PDFs"),
    tagged_only: bool = typer.Option(False, help="Only show words with a classifier tag"),
):
    """Dump the OCR words with their classifier tags."""
    s = load_settings()
    setup_logging(s.log_level)
    try:
        img = load_image(str(path), page=page, dpi=s.pdf_dpi)
        found = TesseractOcr.from_settings(s).recognize(img)
    except TotalPipelineFailure as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(code=1)

    table = Table(title=f"OCR words in {path.name}", box=box.SIMPLE_HEAVY)
    for col in ("Text", "x0", "y0", "x1", "y1", "Conf", "Tags"):
        table.add_column(col)
    for w in found:
        tags = classify(w)
        if tagged_only and not tags:
            continue
        table.add_row(w.text, *[f"{v:.0f}" for v in w.bbox.as_tuple()], f"{w.confidence:.0f}", ", ".join(sorted(tags)))
    console.print(table)


def main():
    app()

if __name__ == "__main__":
    main()
