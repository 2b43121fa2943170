"""
Northstar - CLI Entry Point.

Usage:
    northstar serve            Run the web app
    northstar health           Check configuration
    northstar today --tz ZONE  Show today's date and week start for a timezone
    northstar route PATH       Show how the access gate classifies a path
    northstar --help           Show help
"""

import typer
from rich.console import Console
from rich.table import Table

app = typer.Typer(
    name="northstar",
    help="Northstar - goals, habits and the onboarding wizard.",
    add_completion=False,
)
console = Console()


@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", "--host", help="Interface to bind"),
    port: int = typer.Option(8000, "--port", "-p", envvar="PORT", help="Port to listen on"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes (development)"),
) -> None:
    """Run the web application with uvicorn."""
    import uvicorn

    console.print(f"[bold green]Northstar[/bold green] listening on {host}:{port}")
    uvicorn.run("northstar.web.app:app", host=host, port=port, reload=reload)


@app.command()
def health() -> None:
    """Check system health and configuration."""
    from northstar.config import get_settings

    console.print("\n[bold]Northstar Health Check[/bold]\n")

    try:
        settings = get_settings()
        console.print("✅ Configuration loaded")
        console.print(f"   Environment: {settings.northstar_env}")
        console.print(f"   Log level: {settings.log_level}")

        if settings.supabase_url.startswith("https://"):
            console.print("✅ Supabase URL configured")
        else:
            console.print("❌ Supabase URL missing or invalid")

        if settings.supabase_service_role_key:
            console.print("✅ Service role key configured")
        else:
            console.print("ℹ️  No service role key (anonymous key used for service calls)")

        console.print(f"   Storage bucket: {settings.storage_bucket}")
        console.print("\n[green]All checks passed![/green]")

    except Exception as e:
        console.print(f"\n[red]❌ Configuration error: {e}[/red]")
        console.print("[dim]Make sure you have a .env file with required variables.[/dim]")
        raise typer.Exit(1)


@app.command()
def version() -> None:
    """Show version information."""
    from northstar import __version__

    console.print(f"Northstar version {__version__}")


@app.command()
def today(
    tz: str = typer.Option(None, "--tz", help="IANA timezone (default: detected local zone)"),
) -> None:
    """Show today's date and the current week start in a timezone."""
    from northstar.dates import current_calendar_day, current_week_start, detect_client_timezone, format_for_display

    tz_name = tz or detect_client_timezone()
    day = current_calendar_day(tz_name)

    table = Table(show_header=False, box=None)
    table.add_row("Timezone", tz_name)
    table.add_row("Today", f"{day} ({format_for_display(day)})")
    table.add_row("Week start", current_week_start(tz_name))
    console.print(table)


@app.command()
def route(path: str = typer.Argument(..., help="Request path, e.g. /today")) -> None:
    """Show how the access gate classifies a request path."""
    from northstar.access.routes import classify

    console.print(f"{path} → [bold]{classify(path).value}[/bold]")


@app.command()
def steps() -> None:
    """List the onboarding wizard steps."""
    from northstar.wizard.steps import WIZARD_STEPS, total_estimated_minutes

    table = Table(title="Onboarding Wizard")
    table.add_column("#", justify="right")
    table.add_column("Step")
    table.add_column("Description")
    table.add_column("Minutes", justify="right")
    for step in WIZARD_STEPS:
        table.add_row(step.id, step.label, step.description, str(step.estimated_minutes))
    console.print(table)
    console.print(f"\n[dim]Total: about {total_estimated_minutes()} minutes[/dim]")


if __name__ == "__main__":
    app()
