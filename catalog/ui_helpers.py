import os
import json
from typing import List, Any
from rich.console import Console
from rich.table import Table

# Environment variable to control CLI output mode
# Allowed values: 'plain' (default), 'json', 'rich'
OUTPUT_MODE_ENV = "LIB_CLI_OUTPUT"

_console = Console()

def set_output_mode(mode: str) -> None:
    mode = (mode or "").lower().strip()
    if mode in {"plain", "json", "rich"}:
        os.environ[OUTPUT_MODE_ENV] = mode

def get_output_mode() -> str:
    return os.environ.get(OUTPUT_MODE_ENV, "plain").lower()

def print_book_page(books: List[Any], page: int, num_of_pages: int, total: int) -> None:
    """Print one page of books according to the current output mode.
    - plain: 'ID - Title by Author' lines followed by a page footer
    - json: object with the page info and the books
    - rich: Rich table with the page info as caption
    """
    mode = get_output_mode()

    if mode == "json":
        payload = {
            "page": page,
            "num_of_pages": num_of_pages,
            "total": total,
            "books": [
                {"id": b.id, "title": b.title, "author": b.author, "genre": b.genre, "year": b.year}
                for b in books
            ],
        }
        print(json.dumps(payload, ensure_ascii=False))
        return

    if not books:
        print("No books in library.")
        return

    if mode == "rich":
        table = Table(title="📚 Books", caption=f"Page {page} of {num_of_pages} ({total} books)",
                      show_lines=True, header_style="bold cyan")
        table.add_column("ID", style="magenta", no_wrap=True)
        table.add_column("Title", style="white")
        table.add_column("Author", style="white")
        table.add_column("Genre", style="dim")
        table.add_column("Year", style="dim")
        for b in books:
            table.add_row(str(b.id), b.title, b.author, b.genre or "", "" if b.year is None else str(b.year))
        _console.print(table)
    else:
        for b in books:
            print(f"{b.id} - {b.title} by {b.author}")
        print(f"Page {page} of {num_of_pages} ({total} books)")
