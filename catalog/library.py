import logging
import sqlite3
from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Dict, Any, Union

from catalog.book import Book
from catalog.database import DATABASE_FILE, get_db_connection, initialize_database
from catalog.validation import EDITABLE_FIELDS, FieldError, normalize_fields, validate_fields, year_value

logger = logging.getLogger(__name__)

BOOK_COLUMNS = "id, title, author, genre, year, created_at, updated_at"

# SQLite stores integers as signed 64-bit values
SQLITE_MIN_INT = -(2 ** 63)
SQLITE_MAX_INT = 2 ** 63 - 1


# ------------------------- Results ------------------------- #
@dataclass(frozen=True)
class ValidationFailure:
    """Submitted fields were rejected; nothing was written."""
    errors: List[FieldError] = field(default_factory=list)

    @property
    def fields(self) -> List[str]:
        return [e.field for e in self.errors]


@dataclass(frozen=True)
class NotFound:
    book_id: int


Failure = Union[ValidationFailure, NotFound]


@dataclass(frozen=True)
class Result:
    """Outcome of a write: either the stored book or the reason it was refused."""
    book: Optional[Book] = None
    failure: Optional[Failure] = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    @classmethod
    def success(cls, book: Book) -> "Result":
        return cls(book=book)

    @classmethod
    def fail(cls, failure: Failure) -> "Result":
        return cls(failure=failure)


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _storable_id(book_id: int) -> bool:
    # Ids outside SQLite's integer range cannot name a stored row
    return SQLITE_MIN_INT <= book_id <= SQLITE_MAX_INT


class Library:
    """Manages the book catalog stored in a single SQLite table."""

    def __init__(self, db_file: Optional[str] = None) -> None:
        self.db_file = db_file or DATABASE_FILE
        self._closed = False

    # ------------------------- Lifecycle ------------------------- #
    def initialize(self) -> None:
        """Create the schema if needed. Safe to call more than once."""
        initialize_database(self.db_file)
        self._closed = False
        logger.info(f"Catalog database ready: {self.db_file}")

    def close(self) -> None:
        """Mark the catalog closed; connections are opened per operation so none are left open."""
        self._closed = True
        logger.info(f"Catalog database closed: {self.db_file}")

    def _connect(self) -> sqlite3.Connection:
        if self._closed:
            raise RuntimeError("Library has been closed.")
        return get_db_connection(self.db_file)

    # ------------------------- Reads ------------------------- #
    def list_all(self) -> List[Book]:
        """All books, ordered by title."""
        conn = self._connect()
        try:
            rows = conn.execute(f"SELECT {BOOK_COLUMNS} FROM books ORDER BY title ASC").fetchall()
            return [Book.from_dict(dict(row)) for row in rows]
        finally:
            conn.close()

    def count(self) -> int:
        conn = self._connect()
        try:
            return conn.execute("SELECT COUNT(*) FROM books").fetchone()[0]
        finally:
            conn.close()

    def find_page(self, offset: int, limit: int) -> Tuple[int, List[Book]]:
        """One title-ordered page plus the total number of books."""
        conn = self._connect()
        try:
            total = conn.execute("SELECT COUNT(*) FROM books").fetchone()[0]
            rows = conn.execute(
                f"SELECT {BOOK_COLUMNS} FROM books ORDER BY title ASC LIMIT ? OFFSET ?",
                (limit, offset)
            ).fetchall()
            return total, [Book.from_dict(dict(row)) for row in rows]
        finally:
            conn.close()

    def search_page(self, term: str, offset: int, limit: int) -> Tuple[int, List[Book]]:
        """Like find_page, restricted to books whose title, author, genre or year contains term."""
        pattern = f"%{_escape_like(term.casefold())}%"
        where = """
            CASEFOLD(title) LIKE ? ESCAPE '\\'
            OR CASEFOLD(author) LIKE ? ESCAPE '\\'
            OR CASEFOLD(genre) LIKE ? ESCAPE '\\'
            OR CAST(year AS TEXT) LIKE ? ESCAPE '\\'
        """
        params = (pattern, pattern, pattern, pattern)
        conn = self._connect()
        try:
            total = conn.execute(f"SELECT COUNT(*) FROM books WHERE {where}", params).fetchone()[0]
            rows = conn.execute(
                f"SELECT {BOOK_COLUMNS} FROM books WHERE {where} ORDER BY title ASC LIMIT ? OFFSET ?",
                params + (limit, offset)
            ).fetchall()
            return total, [Book.from_dict(dict(row)) for row in rows]
        finally:
            conn.close()

    def find_by_id(self, book_id: int) -> Optional[Book]:
        if not _storable_id(book_id):
            return None
        conn = self._connect()
        try:
            row = conn.execute(f"SELECT {BOOK_COLUMNS} FROM books WHERE id = ?", (book_id,)).fetchone()
            return Book.from_dict(dict(row)) if row else None
        finally:
            conn.close()

    # ------------------------- Writes ------------------------- #
    def create(self, fields: Dict[str, Any]) -> Result:
        """Validate and insert a new book."""
        values = normalize_fields(fields)
        errors = validate_fields(values)
        if errors:
            logger.info(f"Rejected new book: {', '.join(e.field for e in errors)}")
            return Result.fail(ValidationFailure(errors))

        conn = self._connect()
        try:
            cursor = conn.execute(
                "INSERT INTO books (title, author, genre, year) VALUES (?, ?, ?, ?)",
                (values["title"], values["author"], values.get("genre"), year_value(values.get("year")))
            )
            conn.commit()
            book_id = cursor.lastrowid
        finally:
            conn.close()

        logger.info(f"Created book {book_id}: {values['title']}")
        return Result.success(self.find_by_id(book_id))

    def update(self, book_id: int, fields: Dict[str, Any]) -> Result:
        """Apply fields to an existing book, re-validate and save. The stored row is untouched on failure."""
        existing = self.find_by_id(book_id)
        if existing is None:
            return Result.fail(NotFound(book_id))

        values = {name: getattr(existing, name) for name in EDITABLE_FIELDS}
        values.update(normalize_fields(fields))
        errors = validate_fields(values)
        if errors:
            logger.info(f"Rejected update of book {book_id}: {', '.join(e.field for e in errors)}")
            return Result.fail(ValidationFailure(errors))

        conn = self._connect()
        try:
            conn.execute(
                """
                UPDATE books
                SET title = ?, author = ?, genre = ?, year = ?, updated_at = CURRENT_TIMESTAMP
                WHERE id = ?
                """,
                (values["title"], values["author"], values.get("genre"), year_value(values.get("year")), book_id)
            )
            conn.commit()
        finally:
            conn.close()

        logger.info(f"Updated book {book_id}")
        return Result.success(self.find_by_id(book_id))

    def delete(self, book_id: int) -> bool:
        """Permanently remove a book. Returns False if there was no such book."""
        if not _storable_id(book_id):
            return False
        conn = self._connect()
        try:
            cursor = conn.execute("DELETE FROM books WHERE id = ?", (book_id,))
            conn.commit()
            deleted = cursor.rowcount > 0
        finally:
            conn.close()
        if deleted:
            logger.info(f"Deleted book {book_id}")
        return deleted
