from pathlib import Path
from typing import Any, Dict, Optional

from fastapi import Request
from fastapi.templating import Jinja2Templates

from config import settings

TEMPLATES_DIR = Path(__file__).parent / "templates"
STATIC_DIR = Path(__file__).parent / "static"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.globals["app_name"] = settings.app_name


def render(request: Request, view: str, context: Optional[Dict[str, Any]] = None, status_code: int = 200):
    """Render a named view such as "index" or "books/new-book"."""
    return templates.TemplateResponse(request, f"{view}.html", context or {}, status_code=status_code)


SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
}
