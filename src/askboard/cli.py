"""AskBoard CLI - Command-line interface for the Q&A platform.

Usage:
    askboard init                      Write a local .env configuration
    askboard init-db                   Create database tables
    askboard seed                      Insert demo users, tags, questions and answers
    askboard questions                 List questions
    askboard serve                     Start the API server
    askboard config                    Show merged configuration
"""

import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table
from sqlalchemy.engine import make_url

from askboard.config import get_config
from askboard.core import get_logger

logger = get_logger(__name__)
console = Console()

app = typer.Typer(
    name="askboard",
    help="AskBoard - Question-and-answer community platform",
    add_completion=False,
)


def run_async(coro):
    """Run an async function to completion."""
    return asyncio.run(coro)


# =============================================================================
# SETUP COMMANDS
# =============================================================================

@app.command()
def init(
    data_dir: str = typer.Option("./data", "--data-dir", "-d", help="Data directory"),
):
    """Initialize AskBoard configuration and directories.

    Creates the data directory and a .env pointing at a local SQLite database.

    Examples:
        askboard init
        askboard init --data-dir /var/lib/askboard
    """
    console.print("[bold blue]Initializing AskBoard...[/]")

    data_path = Path(data_dir).resolve()

    try:
        data_path.mkdir(parents=True, exist_ok=True)
        console.print(f"  Created data directory: {data_path}")

        # SQLAlchemy accepts forward slashes on all platforms
        db_url = f"sqlite+aiosqlite:///{(data_path / 'askboard.db').as_posix()}"

        env_path = Path(".env")
        if not env_path.exists():
            with open(env_path, "w", encoding="utf-8") as f:
                f.write(f"ASKBOARD_DATABASE_URL={db_url}\n")
                f.write("ASKBOARD_ACCEPT_POLICY=any\n")
                f.write("# Add other settings as needed\n")
            console.print("[green]✓ Created .env configuration[/]")
        else:
            console.print("[yellow]! .env already exists, skipping creation[/]")

    except OSError as e:
        console.print(f"[bold red]Initialization failed:[/] {e}")
        raise typer.Exit(1)

    console.print("\n[bold green]Initialization complete![/]")
    console.print("Run 'askboard init-db' and then 'askboard serve' to start.")


@app.command("init-db")
def init_db(
    reset: bool = typer.Option(False, "--reset", help="Drop existing tables first"),
):
    """Create all database tables."""
    async def _init_db():
        from askboard.db import close_db, create_tables, drop_tables

        try:
            if reset:
                await drop_tables()
            await create_tables()
        finally:
            await close_db()

    url = make_url(get_config().database_url).render_as_string(hide_password=True)
    console.print(f"[bold blue]Creating tables[/] in {url}")
    run_async(_init_db())
    console.print("[green]✓ Database ready[/]")


@app.command()
def seed():
    """Insert demo users, tags, questions and answers.

    Examples:
        askboard seed
    """
    async def _seed():
        from askboard.db import close_db, create_tables, get_db_session
        from askboard.db.seed import seed_demo_data

        try:
            await create_tables()
            async with get_db_session() as db:
                return await seed_demo_data(db)
        finally:
            await close_db()

    counts = run_async(_seed())
    console.print(
        f"[green]✓ Seeded[/] {counts['users']} users, {counts['tags']} tags, "
        f"{counts['questions']} questions and {counts['answers']} answers"
    )


# =============================================================================
# QUESTION COMMANDS
# =============================================================================

@app.command()
def questions(
    filter: str = typer.Option("newest", "--filter", "-f", help="newest, unanswered or most-voted"),
    limit: int = typer.Option(20, "--limit", "-n", help="Maximum results"),
    search: str = typer.Option(None, "--search", "-s", help="Substring to search for"),
):
    """List questions with their vote and answer counts.

    Examples:
        askboard questions
        askboard questions --filter most-voted
        askboard questions --search react
    """
    async def _list():
        from askboard.core import AskBoardException
        from askboard.db import close_db, get_db_session
        from askboard.services import QAService

        try:
            async with get_db_session() as db:
                service = QAService(db)
                if search:
                    results = await service.search_questions(search)
                else:
                    results = await service.list_questions(offset=0, limit=limit, filter=filter)
        except AskBoardException as e:
            console.print(f"[bold red]Error:[/] {e.message}")
            raise typer.Exit(1)
        finally:
            await close_db()

        if not results:
            console.print("[yellow]No questions found.[/]")
            return

        table = Table(title="Questions")
        table.add_column("ID", style="cyan", justify="right")
        table.add_column("Title", style="green")
        table.add_column("Votes", justify="right")
        table.add_column("Answers", justify="right")
        table.add_column("Tags")

        for q in results:
            title = q.title[:60] + "..." if len(q.title) > 60 else q.title
            table.add_row(str(q.id), title, str(q.vote_count), str(q.answer_count), ", ".join(q.tags))

        console.print(table)

    run_async(_list())


# =============================================================================
# SERVER COMMANDS
# =============================================================================

@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", "-h", help="Host to bind to (default: api_host)"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Port to bind to (default: api_port)"),
    reload: bool = typer.Option(False, "--reload", "-r", help="Enable auto-reload"),
):
    """Start the API server.

    Examples:
        askboard serve
        askboard serve --port 8080
        askboard serve --reload  # For development
    """
    import uvicorn

    config = get_config()
    host = host or config.api_host
    port = port or config.api_port

    console.print("[bold blue]Starting AskBoard API server[/]")
    console.print(f"  Host: {host}:{port}")
    console.print(f"  Reload: {reload}")
    console.print(f"\n  API docs: http://{host}:{port}/docs\n")

    uvicorn.run(
        "askboard.api.main:app",
        host=host,
        port=port,
        reload=reload,
    )


# =============================================================================
# CONFIG COMMAND
# =============================================================================

@app.command("config")
def show_config():
    """Show merged configuration and any validation problems."""
    from askboard.config import diagnose_config, load_config, validate_config

    config = load_config()
    diagnostics = diagnose_config()

    table = Table(title="AskBoard Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")
    for key, value in config.model_dump().items():
        table.add_row(key, str(value))
    console.print(table)

    for label in ("global_config", "local_config"):
        info = diagnostics[label]
        marker = "[green]found[/]" if info["exists"] else "[dim]missing[/]"
        console.print(f"  {info['path']}: {marker}")

    errors = validate_config(config)
    if errors:
        console.print("\n[bold red]Configuration problems:[/]")
        for error in errors:
            console.print(f"  - {error}")
        raise typer.Exit(1)

    console.print("\n[green]✓ Configuration is valid[/]")


if __name__ == "__main__":
    app()
