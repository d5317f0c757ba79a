import json
import logging
import os
import sqlite3
from typing import List, Dict, Any

from config import settings
from catalog.validation import normalize_fields, validate_fields, year_value

logger = logging.getLogger(__name__)

# Default database file; LIBRARY_DB_FILE overrides it through settings.
DATABASE_FILE = settings.database_file


def _casefold(value):
    return value.casefold() if isinstance(value, str) else value


def get_db_connection(db_file: str = DATABASE_FILE) -> sqlite3.Connection:
    """Establishes a connection to the SQLite database."""
    conn = sqlite3.connect(db_file)
    conn.row_factory = sqlite3.Row
    # SQLite's LOWER() only folds ASCII; searches use this instead
    conn.create_function("CASEFOLD", 1, _casefold, deterministic=True)
    return conn


def create_tables(db_file: str = DATABASE_FILE) -> None:
    """Creates the books table in the database if it doesn't exist."""
    conn = get_db_connection(db_file)
    try:
        cursor = conn.cursor()
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS books (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                title TEXT NOT NULL,
                author TEXT NOT NULL,
                genre TEXT,
                year INTEGER,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)
        # The listing is always ordered by title
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_books_title ON books(title)")
        conn.commit()
    finally:
        conn.close()


def seed_from_json(db_file: str = DATABASE_FILE, json_file: str = settings.seed_file) -> int:
    """Imports seed books from a JSON file into an empty books table.

    This is a one-time operation: nothing happens when the table already has
    rows or the file does not exist. Entries that fail the same field checks as
    the web forms are skipped. Returns the number of imported books.
    """
    if not os.path.exists(json_file):
        logger.info(f"Seed file {json_file} not found, skipping")
        return 0

    conn = get_db_connection(db_file)
    try:
        cursor = conn.cursor()
        cursor.execute("SELECT COUNT(*) FROM books")
        if cursor.fetchone()[0] > 0:
            logger.info("Books table is not empty, skipping seed")
            return 0

        with open(json_file, "r", encoding="utf-8") as f:
            data: List[Dict[str, Any]] = json.load(f)

        books_to_insert = []
        for item in data:
            values = normalize_fields(item)
            errors = validate_fields(values)
            if errors:
                logger.info(f"Skipping seed entry {item!r}: {', '.join(e.field for e in errors)}")
                continue
            books_to_insert.append(
                (values["title"], values["author"], values.get("genre"), year_value(values.get("year")))
            )

        if books_to_insert:
            cursor.executemany(
                "INSERT INTO books (title, author, genre, year) VALUES (?, ?, ?, ?)",
                books_to_insert
            )
            conn.commit()
        logger.info(f"Successfully seeded {len(books_to_insert)} books from {json_file}")
        return len(books_to_insert)
    finally:
        conn.close()


def initialize_database(db_file: str = DATABASE_FILE) -> None:
    """Initializes the database, creating tables if needed."""
    create_tables(db_file)
