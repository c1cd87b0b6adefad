"""Report renderers for classified diffs."""

from __future__ import annotations

import io
import json

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.tree import Tree

from catalog_diff.interfaces.renderer import ReportFormat, ReportRenderer
from catalog_diff.models import ClassifiedResult, DeprecationEntry, RenameEntry


class JsonRenderer:
    """The camelCase result contract as indented JSON."""

    def __init__(self, indent: int = 2) -> None:
        self.indent = indent

    def render(self, result: ClassifiedResult) -> str:
        return json.dumps(result.to_contract(), indent=self.indent, ensure_ascii=False)


class RichRenderer:
    """Terminal report built from rich panels, tables and trees.

    Output is captured into a string so the caller decides where it goes.
    """

    def __init__(self, width: int = 100, color: bool = False) -> None:
        self.width = width
        self.color = color

    def render(self, result: ClassifiedResult) -> str:
        buffer = io.StringIO()
        console = Console(
            file=buffer,
            width=self.width,
            force_terminal=self.color,
            color_system="standard" if self.color else None,
        )

        if not result.has_changes:
            console.print("[green]No changes.[/green]")
            return buffer.getvalue()

        console.print(self._summary_panel(result))

        entities = self._entity_table(result)
        if entities.row_count:
            console.print(entities)

        if result.updated:
            tree = Tree(f"[bold]Updated[/bold] ({len(result.updated)})")
            for name, entity in result.updated.items():
                status = "[red]BREAKING[/red]" if entity.is_breaking else "[green]ok[/green]"
                branch = tree.add(f"[cyan]{escape(name)}[/cyan] {status} [dim]{escape(entity.reason)}[/dim]")
                for change in entity.changes:
                    branch.add(f"[dim]{escape(change.dotted_path)}:[/dim] {escape(change.description)}")
            console.print(tree)

        for ambiguity in result.ambiguities:
            console.print(
                f"[yellow]warn:[/yellow] identifier {escape(repr(ambiguity.identifier))} is shared by "
                f"{ambiguity.side} entities {escape(', '.join(ambiguity.candidates))}; "
                f"paired {escape(ambiguity.chosen)} first"
            )
        return buffer.getvalue()

    def _summary_panel(self, result: ClassifiedResult) -> Panel:
        s = result.summary
        t = s.total_entities
        border = "red" if s.has_breaking_changes else "green"
        text = (
            f"[dim]Added:[/dim]        {t.added}\n"
            f"[dim]Deleted:[/dim]      {t.deleted}\n"
            f"[dim]Renamed:[/dim]      {t.renamed}\n"
            f"[dim]Deprecated:[/dim]   {t.deprecated}\n"
            f"[dim]Reverted:[/dim]     {t.reverted}\n"
            f"[dim]Updated:[/dim]      {t.updated}\n\n"
            f"[dim]Breaking:[/dim]     {s.breaking_changes}\n"
            f"[dim]Non-breaking:[/dim] {s.non_breaking_changes}"
        )
        return Panel(text, title="Catalog Diff", border_style=border)

    def _entity_table(self, result: ClassifiedResult) -> Table:
        table = Table(title="Entities")
        table.add_column("Change", style="bold")
        table.add_column("Name", style="cyan")
        table.add_column("Detail")
        for name in result.added:
            table.add_row("[green]added[/green]", escape(name), "")
        for name in result.deleted:
            table.add_row("[red]deleted[/red]", escape(name), "")
        for name, entry in result.renamed.items():
            detail = f"from {escape(entry.old_name)}"
            table.add_row("[blue]renamed[/blue]", escape(name), detail + _body_status(entry))
        for name, entry in result.deprecated.items():
            detail = escape(entry.comment or "")
            table.add_row("[yellow]deprecated[/yellow]", escape(name), detail + _body_status(entry))
        for name in result.reverted:
            table.add_row("[magenta]reverted[/magenta]", escape(name), "")
        return table


def _body_status(entry: RenameEntry | DeprecationEntry) -> str:
    if not entry.changes:
        return ""
    status = "[red]BREAKING[/red]" if entry.is_breaking else "[green]ok[/green]"
    listed = "; ".join(escape(c.description) for c in entry.changes)
    return f" {status} [dim]{listed}[/dim]"


def create_renderer(format: ReportFormat | str) -> ReportRenderer:
    """Return the renderer for *format*.

    Raises ValueError for unknown formats.
    """
    try:
        fmt = ReportFormat(format)
    except ValueError:
        raise ValueError(
            f"Unknown report format '{format}'. Supported: "
            + ", ".join(f.value for f in ReportFormat)
        ) from None
    if fmt is ReportFormat.json:
        return JsonRenderer()
    return RichRenderer()
