import json

from catalog.database import create_tables, get_db_connection, seed_from_json


def _write_seed(tmp_path, books):
    path = tmp_path / "books.json"
    path.write_text(json.dumps(books), encoding="utf-8")
    return str(path)


def test_create_tables_is_idempotent(db_file):
    create_tables(db_file)
    create_tables(db_file)
    conn = get_db_connection(db_file)
    try:
        columns = [row[1] for row in conn.execute("PRAGMA table_info(books)").fetchall()]
    finally:
        conn.close()
    assert columns[:5] == ["id", "title", "author", "genre", "year"]


def test_seed_into_empty_table(lib, tmp_path):
    seed = _write_seed(tmp_path, [
        {"title": "Emma", "author": "Jane Austen", "genre": "Classic", "year": 1815},
        {"title": "Frankenstein", "author": "Mary Shelley"},
        {"title": "No Author"},
    ])
    assert seed_from_json(lib.db_file, seed) == 2
    assert [b.title for b in lib.list_all()] == ["Emma", "Frankenstein"]


def test_seed_skips_non_empty_table(lib, tmp_path):
    lib.create({"title": "Already Here", "author": "Someone"})
    seed = _write_seed(tmp_path, [{"title": "Emma", "author": "Jane Austen"}])
    assert seed_from_json(lib.db_file, seed) == 0
    assert lib.count() == 1


def test_seed_missing_file(lib, tmp_path):
    assert seed_from_json(lib.db_file, str(tmp_path / "missing.json")) == 0


def test_seed_applies_form_validation(lib, tmp_path):
    seed = _write_seed(tmp_path, [
        {"title": "Dracula", "author": "Bram Stoker", "genre": " Classic ", "year": " 1897 "},
        {"title": "Undated", "author": "Somebody", "year": "circa 1900"},
        {"title": "   ", "author": "Blank Title"},
        {"title": "No Genre", "author": "Someone", "genre": "  "},
    ])
    assert seed_from_json(lib.db_file, seed) == 2
    books = {b.title: b for b in lib.list_all()}
    assert sorted(books) == ["Dracula", "No Genre"]
    assert books["Dracula"].genre == "Classic"
    assert books["Dracula"].year == 1897
    assert books["No Genre"].genre is None
