"""
EczemaHub Setup Wizard
First-time setup: choose the identity that becomes the catalog's first admin.
"""

from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.table import Table

from eczemahub import __version__
from eczemahub.catalog import ANONYMOUS, Identity, identity_from
from eczemahub.config.settings import get_settings

console = Console()


WIZARD_BANNER = f"""
[cyan bold]  EczemaHub[/cyan bold]
[bold]  First-time setup[/bold]
[dim]  v{__version__}[/dim]
"""


class SetupWizard:
    """Interactive first-run setup. Returns the chosen admin identity."""

    def __init__(self):
        self.settings = get_settings()

    def run(self) -> Optional[Identity]:
        console.print(WIZARD_BANNER)
        console.print(Panel(
            "[bold]No catalog snapshot was found.[/bold]\n\n"
            "A new, empty catalog will be created. The identity you enter below\n"
            "becomes its only admin: it can delete and verify any resource.",
            border_style="cyan",
            title="Setup",
        ))

        raw = Prompt.ask("Admin identity (the principal sent in the identity header)")
        admin = identity_from(raw)
        if admin == ANONYMOUS:
            console.print("[red]An admin identity is required.[/red]")
            return None

        self._show_summary(admin)
        if not Confirm.ask("Create the catalog?", default=True):
            console.print("[yellow]Setup cancelled.[/yellow]")
            return None
        return admin

    def _show_summary(self, admin: Identity):
        table = Table(show_header=False, box=None, padding=(0, 2))
        table.add_column("key", style="dim")
        table.add_column("value", style="cyan")
        table.add_row("Admin", admin)
        table.add_row("Snapshot", str(self.settings.resolve_path(self.settings.get("catalog.snapshot_path"))))
        table.add_row("Identity header", self.settings.get("gateway.identity_header", "X-Caller-Id"))
        console.print(table)
