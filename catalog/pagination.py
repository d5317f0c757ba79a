import math
import re
from dataclasses import dataclass
from typing import Any, Optional

from config import settings

PAGE_SIZE = settings.page_size

# Largest OFFSET SQLite accepts (signed 64-bit)
MAX_OFFSET = 2 ** 63 - 1
PAGE_PATTERN = re.compile(r"^[0-9]+$")


@dataclass(frozen=True)
class PageRequest:
    """Offset/limit window for one page of the title-ordered listing."""

    page: int
    offset: int
    limit: int

    @classmethod
    def build(cls, page: int, page_size: int = PAGE_SIZE) -> "PageRequest":
        # Any page past MAX_OFFSET is just as empty as MAX_OFFSET itself
        offset = min((page - 1) * page_size, MAX_OFFSET)
        return cls(page=page, offset=offset, limit=page_size)


def parse_page(raw: Any) -> int:
    """Page number from a query string value; 1 when absent, not plain digits, or below 1.

    There is no upper bound: a page past the end simply yields no rows.
    """
    if raw is None:
        return 1
    text = str(raw).strip()
    if not PAGE_PATTERN.match(text):
        return 1
    # Very long digit strings are far past any data; int() also refuses huge strings
    if len(text) > len(str(MAX_OFFSET)):
        return MAX_OFFSET
    page = int(text)
    return page if page >= 1 else 1


def number_of_pages(total: int, page_size: int = PAGE_SIZE) -> int:
    return math.ceil(total / page_size)


def normalize_search_term(raw: Optional[str]) -> Optional[str]:
    """Trimmed search term, or None when the caller should fall back to the plain listing."""
    if raw is None:
        return None
    term = raw.strip()
    return term or None
