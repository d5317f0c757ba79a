from typing import Optional, Dict, Any

from fastapi import APIRouter, Depends, Form, HTTPException, Query, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from catalog.book import Book
from catalog.library import Library, NotFound, ValidationFailure
from catalog.pagination import PAGE_SIZE, PageRequest, normalize_search_term, number_of_pages, parse_page
from catalog.views import render

router = APIRouter(prefix="/books")

LIST_URL = "/books"


def get_library(request: Request) -> Library:
    """Dependency returning the catalog the app was built with."""
    return request.app.state.library


def _redirect_to_list() -> RedirectResponse:
    # 303 so the browser follows a form POST with a GET
    return RedirectResponse(LIST_URL, status_code=303)


def _book_fields(title: str, author: str, genre: str, year: str) -> Dict[str, Any]:
    return {"title": title, "author": author, "genre": genre, "year": year}


def _get_book_or_404(library: Library, book_id: int) -> Book:
    book = library.find_by_id(book_id)
    if book is None:
        raise HTTPException(status_code=404, detail="Book not found")
    return book


# Show the full list of books, one page at a time
@router.get("", response_class=HTMLResponse)
def list_books(request: Request, page: Optional[str] = None, library: Library = Depends(get_library)):
    page_request = PageRequest.build(parse_page(page), PAGE_SIZE)
    total, books = library.find_page(page_request.offset, page_request.limit)
    return render(request, "index", {
        "books": books,
        "title": "Library",
        "num_of_pages": number_of_pages(total, PAGE_SIZE),
        "page": page_request.page,
    })


# Must stay above /{book_id}, which would otherwise try to read "search" as an id
@router.get("/search", response_class=HTMLResponse)
def search_books(
    request: Request,
    search_value: Optional[str] = Query(None, alias="searchValue"),
    page: Optional[str] = None,
    library: Library = Depends(get_library),
):
    term = normalize_search_term(search_value)
    if term is None:
        return RedirectResponse(LIST_URL, status_code=302)

    page_request = PageRequest.build(parse_page(page), PAGE_SIZE)
    total, books = library.search_page(term, page_request.offset, page_request.limit)
    if total == 0:
        return render(request, "books/books-not-found", {"title": "Books Not Found", "search_value": term})
    return render(request, "index", {
        "books": books,
        "title": "Library",
        "num_of_pages": number_of_pages(total, PAGE_SIZE),
        "page": page_request.page,
        "search_value": term,
    })


@router.get("/new", response_class=HTMLResponse)
def new_book_form(request: Request):
    return render(request, "books/new-book", {"book": Book(title="", author=""), "title": "New Book"})


@router.post("/new", response_class=HTMLResponse)
def create_book(
    request: Request,
    title: str = Form(""),
    author: str = Form(""),
    genre: str = Form(""),
    year: str = Form(""),
    library: Library = Depends(get_library),
):
    """Save a new book, or show the form again with the user's input and the validation messages."""
    fields = _book_fields(title, author, genre, year)
    result = library.create(fields)
    if result.ok:
        return _redirect_to_list()
    return render(request, "books/new-book", {
        "book": Book.draft(fields),
        "errors": result.failure.errors,
        "title": "New Book",
    })


@router.get("/{book_id}", response_class=HTMLResponse)
def edit_book_form(request: Request, book_id: int, library: Library = Depends(get_library)):
    book = _get_book_or_404(library, book_id)
    return render(request, "books/update-book", {"book": book, "errors": [], "title": "Update Book"})


@router.post("/{book_id}", response_class=HTMLResponse)
def update_book(
    request: Request,
    book_id: int,
    title: str = Form(""),
    author: str = Form(""),
    genre: str = Form(""),
    year: str = Form(""),
    library: Library = Depends(get_library),
):
    fields = _book_fields(title, author, genre, year)
    result = library.update(book_id, fields)
    if result.ok:
        return _redirect_to_list()
    if isinstance(result.failure, NotFound):
        raise HTTPException(status_code=404, detail="Book not found")
    if isinstance(result.failure, ValidationFailure):
        # The draft keeps the path id so the form posts back to the same book
        return render(request, "books/update-book", {
            "book": Book.draft(fields, id=book_id),
            "errors": result.failure.errors,
            "title": "Update Book",
        })
    raise RuntimeError(f"Unexpected update failure: {result.failure!r}")


@router.get("/{book_id}/delete", response_class=HTMLResponse)
def delete_book_form(request: Request, book_id: int, library: Library = Depends(get_library)):
    book = _get_book_or_404(library, book_id)
    return render(request, "books/delete", {"book": book, "title": "Delete Book"})


# Deletes a book. This can't be undone.
@router.post("/{book_id}/delete")
def delete_book(book_id: int, library: Library = Depends(get_library)):
    _get_book_or_404(library, book_id)
    library.delete(book_id)
    return _redirect_to_list()
