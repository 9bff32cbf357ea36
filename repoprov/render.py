"""
Rendering functions for repoprov output.

This module handles all pretty-printing and table formatting.
Core functions return data, this module makes it human-readable.
"""

from rich.table import Table
from rich.console import Console
from rich import box
from typing import List, Dict, Any, Optional

console = Console()

STATUS_STYLES = {
    'passed': 'green',
    'skipped': 'yellow',
    'failed': 'red',
}


def _status(value: str) -> str:
    style = STATUS_STYLES.get(value)
    return f"[{style}]{value}[/{style}]" if style else value


def render_table(headers: List[str], rows: List[List[str]], title: Optional[str] = None) -> None:
    """
    Render a generic table with the given headers and rows.
    """
    if not rows:
        console.print("[yellow]No data to display.[/yellow]")
        return

    table = Table(
        title=title,
        box=box.ROUNDED,
        show_header=True,
        header_style="bold magenta"
    )
    for header in headers:
        table.add_column(header)
    for row in rows:
        table.add_row(*[str(val) for val in row])

    console.print(table)


def render_provision_table(records: List[Dict[str, Any]]) -> None:
    """
    Render a provisioning run: one row per identity, then probes and a summary.
    """
    repos = [r for r in records if r.get('type') == 'repository']
    probes = [r for r in records if r.get('type') == 'probe']
    summary = next((r for r in records if r.get('type') == 'summary'), None)

    if not repos:
        console.print("[yellow]No repositories declared.[/yellow]")
    else:
        table = Table(
            title="Provisioning",
            box=box.ROUNDED,
            show_header=True,
            header_style="bold magenta"
        )
        table.add_column("Identity", style="cyan")
        table.add_column("Status")
        table.add_column("Path", style="dim")
        table.add_column("Recorded", style="blue")
        table.add_column("Details")

        for repo in repos:
            recorded = repo.get('recorded')
            details = repo.get('error') or repo.get('message') or ""
            table.add_row(
                repo['identity'],
                _status(repo['status']),
                repo.get('path', ''),
                "" if recorded is None else ("yes" if recorded else "no"),
                details,
            )
        console.print(table)

    if probes:
        render_probe_table(probes)

    if summary:
        console.print(
            f"\n[bold]{summary['total']}[/bold] declared: "
            f"[green]{summary['passed']} passed[/green], "
            f"[yellow]{summary['skipped']} skipped[/yellow], "
            f"[red]{summary['failed']} failed[/red]"
            + (f", {summary['malformed']} malformed entries ignored" if summary.get('malformed') else "")
        )


def render_probe_table(probes: List[Dict[str, Any]]) -> None:
    """Render capability probe results."""
    table = Table(
        title="Capability probes",
        box=box.ROUNDED,
        show_header=True,
        header_style="bold magenta"
    )
    table.add_column("Surface", style="cyan")
    table.add_column("Status")
    table.add_column("Checks")
    table.add_column("Details")

    for probe in probes:
        checks = probe.get('checks', [])
        passed = sum(1 for c in checks if c.get('passed'))
        details = probe.get('reason') or ", ".join(probe.get('failing', []))
        table.add_row(
            probe['surface'],
            _status(probe['status']),
            f"{passed}/{len(checks)}",
            details,
        )
    console.print(table)


def render_validation_table(result: Dict[str, Any]) -> None:
    """Render one validation result."""
    rows = []
    for check in result.get('checks', []):
        rows.append([
            check['artifact'],
            _status('passed' if check['passed'] else 'failed'),
            check.get('message', ''),
        ])
    render_table(["Artifact", "Status", "Details"], rows, title=result.get('path'))
