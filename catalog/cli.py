import json
import os
import subprocess
import sys
from typing import Optional

import typer
from rich.console import Console

from config import settings
from catalog.database import seed_from_json
from catalog.library import Library
from catalog.logging_setup import configure_logging
from catalog.pagination import PAGE_SIZE, PageRequest, normalize_search_term, number_of_pages
from catalog.ui_helpers import set_output_mode, print_book_page

APP_NAME = "Library CLI"

console = Console()

app = typer.Typer(help=APP_NAME)


def _library(ctx: typer.Context) -> Library:
    return ctx.obj


@app.callback()
def _global_options(
    ctx: typer.Context,
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output format: plain | json | rich (default: plain)",
    ),
    db: str = typer.Option(settings.database_file, "--db", help="SQLite database file"),
):
    """Global options for the CLI (output mode, database file)."""
    configure_logging("WARNING")
    if output:
        set_output_mode(output)
    library = Library(db)
    library.initialize()
    ctx.obj = library
    ctx.call_on_close(library.close)


@app.command("init-db")
def cli_init_db(ctx: typer.Context):
    """Create the books table if it does not exist."""
    print(f"Database ready: {_library(ctx).db_file}")


@app.command("seed")
def cli_seed(ctx: typer.Context, file_path: str = typer.Argument(settings.seed_file, help="JSON file with a list of books")):
    """Import books from a JSON file into an empty catalog."""
    lib = _library(ctx)
    if not os.path.exists(file_path):
        print(f"File not found: {file_path}")
        raise typer.Exit(code=1)
    try:
        count = seed_from_json(lib.db_file, file_path)
    except json.JSONDecodeError as e:
        print(f"Could not parse {file_path}: {e}")
        raise typer.Exit(code=1)
    print(f"Imported {count} books.")


@app.command("list")
def cli_list(ctx: typer.Context, page: int = typer.Option(1, "--page", "-p", min=1, help="Page number")):
    """List one page of books, ordered by title."""
    request = PageRequest.build(page, PAGE_SIZE)
    total, books = _library(ctx).find_page(request.offset, request.limit)
    print_book_page(books, request.page, number_of_pages(total, PAGE_SIZE), total)


@app.command("search")
def cli_search(
    ctx: typer.Context,
    query: str = typer.Argument(..., help="Text to look for in title, author, genre or year"),
    page: int = typer.Option(1, "--page", "-p", min=1, help="Page number"),
):
    """Search books by title, author, genre or year."""
    term = normalize_search_term(query)
    if term is None:
        print("Search term cannot be empty.")
        raise typer.Exit(code=1)
    request = PageRequest.build(page, PAGE_SIZE)
    total, books = _library(ctx).search_page(term, request.offset, request.limit)
    if total == 0:
        print(f"No books match '{term}'.")
        return
    print_book_page(books, request.page, number_of_pages(total, PAGE_SIZE), total)


@app.command("serve")
def cli_serve(
    ctx: typer.Context,
    host: str = typer.Option(settings.api_host, "--host", help="Interface to bind"),
    port: int = typer.Option(settings.api_port, "--port", help="Port to listen on"),
    reload: bool = typer.Option(False, "--reload", help="Restart on code changes"),
):
    """Start the web interface using uvicorn."""
    url = f"http://{host}:{port}/"
    print(f"Starting web UI on {url}")
    args = [
        sys.executable,
        "-m", "uvicorn",
        "catalog.api:app",
        "--host", host,
        "--port", str(port),
    ]
    if reload:
        args.append("--reload")
    env = dict(os.environ, LIBRARY_DB_FILE=_library(ctx).db_file)
    try:
        subprocess.run(args, env=env)
    except FileNotFoundError:
        console.print("[bold red]Error:[/] could not start `uvicorn`. Make sure it is installed in this environment.")
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
