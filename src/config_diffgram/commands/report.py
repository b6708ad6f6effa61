"""Generate HTML change report between two snapshots."""

import io
import logging

from rich.console import Console

from ..bookmarks import bookmark_code
from ..diffgram import DiffgramDataset
from ..markup import HtmlMarkupWriter, escape_html
from ..models import RowState
from ..renderer import HierarchicalRenderer
from ..snapshot import SnapshotIO
from ..textio import write_text_atomic
from .diff import compute_diff

logger = logging.getLogger(__name__)
console = Console()

DEFAULT_TITLE = "Configuration Change Report"
TOC_SECTION_ID = "TOC"

STYLESHEET = """
        body {
            font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
            margin: 0;
            padding: 20px;
            background: #f5f5f5;
        }
        .container {
            max-width: 1400px;
            margin: 0 auto;
            background: white;
            padding: 30px;
            border-radius: 8px;
            box-shadow: 0 2px 4px rgba(0,0,0,0.1);
        }
        h1 {
            color: #333;
            border-bottom: 2px solid #007bff;
            padding-bottom: 10px;
        }
        h2 {
            color: #555;
            margin-top: 30px;
        }
        table.diffgram {
            border-collapse: collapse;
            font-size: 13px;
        }
        table.diffgram th, table.diffgram td {
            border: 1px solid #dee2e6;
            padding: 4px 8px;
            vertical-align: top;
        }
        table.diffgram th {
            background: #f8f9fa;
            text-align: left;
        }
        .Added { color: #28a745; }
        .Modified { color: #b8860b; }
        .Deleted { color: #dc3545; text-decoration: line-through; }
        .Unchanged { color: #333; }
        td.Modified span.Modified { text-decoration: none; }
"""


def section_headers(diffgram: DiffgramDataset) -> list[str]:
    """Names of the rendered columns of every table level, in output order."""
    headers = []
    for table_index, table in enumerate(diffgram.tables):
        visible = diffgram.print_spec.visible_columns(table_index)
        headers.extend(column.name for column in table.columns if column.ordinal in visible)
    return headers


def section_summary(diffgram: DiffgramDataset) -> str:
    totals = {state.value: 0 for state in RowState}
    for table in diffgram.tables:
        for state, count in table.state_counts().items():
            totals[state] += count
    return ", ".join(f"{state}: {count}" for state, count in totals.items())


def render_section(diffgram: DiffgramDataset, writer: HtmlMarkupWriter) -> None:
    """Write the heading, summary and hierarchical table of one section."""
    writer.begin_element("h2")
    writer.begin_element("a")
    writer.write_attribute("name", bookmark_code(diffgram.name, TOC_SECTION_ID))
    writer.write_text(diffgram.name)
    writer.end_element("a")
    writer.end_element("h2")
    writer.write_line()

    writer.begin_element("p")
    writer.write_text(section_summary(diffgram))
    writer.end_element("p")
    writer.write_line()

    HierarchicalRenderer(diffgram, writer).render_table(
        css_class="diffgram", headers=section_headers(diffgram)
    )


def generate_html(diffgrams: list[DiffgramDataset], title: str = DEFAULT_TITLE) -> str:
    """Generate a self-contained HTML report (inline CSS, no external dependencies)."""
    buffer = io.StringIO()
    writer = HtmlMarkupWriter(buffer)

    writer.write_raw(
        f"""<!DOCTYPE html>
<html>
<head>
    <meta charset="UTF-8">
    <title>{escape_html(title)}</title>
    <style>{STYLESHEET}    </style>
</head>
<body>
"""
    )

    writer.begin_element("div")
    writer.write_attribute("class", "container")
    writer.write_line()

    writer.begin_element("h1")
    writer.write_text(title)
    writer.end_element("h1")
    writer.write_line()

    if not diffgrams:
        writer.begin_element("p")
        writer.write_text("No configuration sections found.")
        writer.end_element("p")
        writer.write_line()

    writer.begin_element("ul")
    writer.write_attribute("class", "toc")
    for diffgram in diffgrams:
        writer.begin_element("li")
        writer.begin_element("a")
        writer.write_attribute("href", f"#{bookmark_code(diffgram.name, TOC_SECTION_ID)}")
        writer.write_text(diffgram.name)
        writer.end_element("a")
        writer.end_element("li")
    writer.end_element("ul")
    writer.write_line()

    for diffgram in diffgrams:
        render_section(diffgram, writer)

    writer.end_element("div")
    writer.write_raw("\n</body>\n</html>\n")

    return buffer.getvalue()


def generate_report(pilot: str, production: str, output: str, title: str = DEFAULT_TITLE) -> int:
    """Generate HTML change report between two snapshots.

    Args:
        pilot: Path to the pilot snapshot JSON
        production: Path to the production snapshot JSON
        output: Output HTML file path
        title: Report title

    Returns:
        0 on success, 1 on error
    """
    try:
        diffgrams = compute_diff(SnapshotIO.read(pilot), SnapshotIO.read(production))
        html = generate_html(diffgrams, title)
        write_text_atomic(output, html)
    except Exception as e:
        console.print(f"[red]Error generating report:[/red] {e}")
        logger.debug("Report generation failed", exc_info=True)
        return 1

    console.print(f"[green]✓[/green] Generated report: {output}")
    return 0
