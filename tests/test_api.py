import sqlite3

from catalog.errors import NOT_FOUND_MESSAGE, SERVER_ERROR_MESSAGE
from catalog.library import Library


def _add(lib, title, author="Author", genre=None, year=None):
    result = lib.create({"title": title, "author": author, "genre": genre, "year": year})
    assert result.ok
    return result.book


def test_home_redirects_to_books(client):
    response = client.get("/", follow_redirects=False)
    assert response.status_code == 302
    assert response.headers["location"] == "/books"


def test_list_books_first_page(client, lib):
    for i in range(12):
        _add(lib, f"Book {i:02d}")
    response = client.get("/books")
    assert response.status_code == 200
    assert "Book 00" in response.text
    assert "Book 04" in response.text
    assert "Book 05" not in response.text
    # three pages of five
    assert 'href="/books?page=3"' in response.text
    assert 'href="/books?page=4"' not in response.text


def test_list_books_later_page(client, lib):
    for i in range(12):
        _add(lib, f"Book {i:02d}")
    response = client.get("/books?page=3")
    assert response.status_code == 200
    assert "Book 10" in response.text
    assert "Book 11" in response.text
    assert "Book 09" not in response.text


def test_list_books_bad_page_falls_back_to_first(client, lib):
    _add(lib, "Only Book")
    response = client.get("/books?page=abc")
    assert response.status_code == 200
    assert "Only Book" in response.text


def test_list_books_page_past_the_end_is_empty(client, lib):
    _add(lib, "Only Book")
    response = client.get("/books?page=9")
    assert response.status_code == 200
    assert "Only Book" not in response.text


def test_list_books_huge_page_is_empty(client, lib):
    _add(lib, "Only Book")
    response = client.get("/books?page=99999999999999999999")
    assert response.status_code == 200
    assert "Only Book" not in response.text


def test_search_huge_page_is_empty(client, lib):
    _add(lib, "Only Book")
    response = client.get("/books/search", params={"searchValue": "only", "page": "9223372036854775807"})
    assert response.status_code == 200
    assert "Only Book" not in response.text


def test_search_renders_matches_and_echoes_term(client, lib):
    _add(lib, "White Teeth", "Zadie Smith")
    _add(lib, "Emma", "Jane Austen")
    response = client.get("/books/search", params={"searchValue": "SMITH"})
    assert response.status_code == 200
    assert "White Teeth" in response.text
    assert "Emma" not in response.text
    assert 'value="SMITH"' in response.text


def test_search_paginates_with_term_in_links(client, lib):
    for i in range(6):
        _add(lib, f"Fantasy {i}", genre="Fantasy")
    response = client.get("/books/search", params={"searchValue": "fantasy", "page": "2"})
    assert response.status_code == 200
    assert "Fantasy 5" in response.text
    assert "Fantasy 0" not in response.text
    assert "searchValue=fantasy&page=1" in response.text


def test_search_without_matches_renders_not_found_view(client, lib):
    _add(lib, "Emma", "Jane Austen")
    response = client.get("/books/search", params={"searchValue": "zzz"})
    assert response.status_code == 200
    assert "No Books Found" in response.text


def test_blank_search_redirects_to_list(client):
    response = client.get("/books/search", params={"searchValue": "   "}, follow_redirects=False)
    assert response.status_code == 302
    assert response.headers["location"] == "/books"

    response = client.get("/books/search", follow_redirects=False)
    assert response.status_code == 302


def test_new_book_form(client):
    response = client.get("/books/new")
    assert response.status_code == 200
    assert 'action="/books/new"' in response.text


def test_create_book_redirects_to_list(client, lib):
    response = client.post(
        "/books/new",
        data={"title": "Dune", "author": "Frank Herbert", "genre": "Science Fiction", "year": "1965"},
        follow_redirects=False,
    )
    assert response.status_code == 303
    assert response.headers["location"] == "/books"
    books = lib.list_all()
    assert len(books) == 1
    assert books[0].title == "Dune"
    assert books[0].year == 1965


def test_create_book_with_errors_redisplays_form(client, lib):
    response = client.post("/books/new", data={"title": "", "author": "", "genre": "Poetry", "year": "2001"})
    assert response.status_code == 200
    assert 'Please provide a value for &#34;Title&#34;' in response.text
    assert 'Please provide a value for &#34;Author&#34;' in response.text
    # The user's input comes back in the form
    assert 'value="Poetry"' in response.text
    assert 'value="2001"' in response.text
    assert lib.count() == 0


def test_edit_form_shows_book(client, lib):
    book = _add(lib, "Emma", "Jane Austen")
    response = client.get(f"/books/{book.id}")
    assert response.status_code == 200
    assert 'value="Emma"' in response.text
    assert f'action="/books/{book.id}"' in response.text


def test_edit_form_for_missing_book_is_404(client):
    # Earlier versions answered this with a 500; a missing book is always a 404 now
    response = client.get("/books/999")
    assert response.status_code == 404
    assert NOT_FOUND_MESSAGE.replace("'", "&#39;") in response.text


def test_non_numeric_id_is_404(client):
    response = client.get("/books/not-a-number")
    assert response.status_code == 404


def test_out_of_range_id_is_404(client, lib):
    _add(lib, "Stays")
    huge = "99999999999999999999"
    assert client.get(f"/books/{huge}").status_code == 404
    assert client.post(f"/books/{huge}", data={"title": "T", "author": "A"}).status_code == 404
    assert client.get(f"/books/{huge}/delete").status_code == 404
    assert client.post(f"/books/{huge}/delete").status_code == 404
    assert lib.count() == 1


def test_update_book_redirects_to_list(client, lib):
    book = _add(lib, "Old Title", "Old Author")
    response = client.post(
        f"/books/{book.id}",
        data={"title": "New Title", "author": "New Author", "genre": "", "year": ""},
        follow_redirects=False,
    )
    assert response.status_code == 303
    assert response.headers["location"] == "/books"
    assert lib.find_by_id(book.id).title == "New Title"


def test_update_book_with_errors_redisplays_form_for_same_book(client, lib):
    book = _add(lib, "Keep Me", "Author")
    response = client.post(f"/books/{book.id}", data={"title": "", "author": "Changed"})
    assert response.status_code == 200
    assert "Please provide a value for &#34;Title&#34;" in response.text
    assert f'action="/books/{book.id}"' in response.text
    assert 'value="Changed"' in response.text
    stored = lib.find_by_id(book.id)
    assert stored.title == "Keep Me"
    assert stored.author == "Author"


def test_update_missing_book_is_404(client):
    response = client.post("/books/999", data={"title": "T", "author": "A"})
    assert response.status_code == 404


def test_delete_confirmation(client, lib):
    book = _add(lib, "Doomed", "Author")
    response = client.get(f"/books/{book.id}/delete")
    assert response.status_code == 200
    assert "Doomed" in response.text
    assert f'action="/books/{book.id}/delete"' in response.text


def test_delete_confirmation_for_missing_book_is_404(client):
    response = client.get("/books/999/delete")
    assert response.status_code == 404


def test_delete_book(client, lib):
    book = _add(lib, "Doomed", "Author")
    response = client.post(f"/books/{book.id}/delete", follow_redirects=False)
    assert response.status_code == 303
    assert response.headers["location"] == "/books"
    assert lib.find_by_id(book.id) is None


def test_delete_missing_book_is_404(client, lib):
    _add(lib, "Stays", "Author")
    response = client.post("/books/999/delete")
    assert response.status_code == 404
    assert lib.count() == 1


def test_unmatched_path_is_404(client):
    response = client.get("/no/such/page")
    assert response.status_code == 404
    assert "Page Not Found" in response.text


def test_other_http_errors_keep_their_status(client):
    response = client.put("/books")
    assert response.status_code == 405
    assert "Error" in response.text


def test_storage_failure_is_rendered_as_500(client, monkeypatch):
    def broken(self, offset, limit):
        raise sqlite3.OperationalError("disk I/O error")

    monkeypatch.setattr(Library, "find_page", broken)
    response = client.get("/books")
    assert response.status_code == 500
    assert SERVER_ERROR_MESSAGE in response.text
    # Internal details stay in the log
    assert "disk I/O error" not in response.text
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "DENY"


def test_security_headers(client):
    response = client.get("/books")
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "DENY"


def test_static_stylesheet_is_served(client):
    response = client.get("/static/css/style.css")
    assert response.status_code == 200
    assert response.headers["Cache-Control"] == "public, max-age=31536000"
