"""Library Catalog - Core Application Package

This package contains the core application modules including:
- Web application and error handlers (api.py, errors.py)
- Book routes (routes.py)
- Catalog storage logic (library.py)
- Pagination helpers (pagination.py)
- Data models (book.py)
- Database layer (database.py)
- CLI interface (cli.py)
"""
