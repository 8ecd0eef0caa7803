"""
PDF processing utilities for post-render measurement.

Main class:
    PDFDocument: Parsed PDF giving per-page content extents.

Helper functions:
    page_count: Quick page count without full extraction.
    cluster_by_y_tolerance: Y-coordinate clustering for line detection.
"""

import io
from pathlib import Path
from typing import Dict, List, Optional, Union

import pdfplumber
from PyPDF2 import PdfReader

PDFSource = Union[str, Path, bytes]


def _open_source(source: PDFSource):
    """Return something both pdfplumber and PyPDF2 accept."""
    if isinstance(source, bytes):
        return io.BytesIO(source)
    return str(source)


def page_count(source: PDFSource) -> Optional[int]:
    """Get page count from a PDF path or byte string, or None if unreadable."""
    try:
        reader = PdfReader(_open_source(source))
        return len(reader.pages)
    except Exception:
        return None


def cluster_by_y_tolerance(chars: List, tolerance: float = 3.0) -> List[List]:
    """
    Group characters into lines by Y-coordinate proximity.

    Handles baseline shifts between bold/regular text that would otherwise split lines.
    """
    if not chars:
        return []

    sorted_chars = sorted(chars, key=lambda c: c["top"])

    lines = []
    current_line = [sorted_chars[0]]
    current_y = sorted_chars[0]["top"]

    for char in sorted_chars[1:]:
        if abs(char["top"] - current_y) <= tolerance:
            current_line.append(char)
        else:
            lines.append(current_line)
            current_line = [char]
            current_y = char["top"]

    if current_line:
        lines.append(current_line)

    return lines


class PDFDocument:
    """
    Parsed PDF with per-page content extents.

    Extents are measured from the characters pdfplumber finds on each page, in
    PDF points from the top edge of the page. Page data is lazily loaded and
    cached on first access.

    Args:
        source: Path to PDF file or the PDF bytes
        y_tolerance: Max Y-distance (points) to group characters as same line

    Example:
        >>> pdf = PDFDocument(rendered.pdf_bytes)
        >>> bottom = pdf.content_bottom(pdf.page_count)  # points from page top, or None
    """

    def __init__(self, source: PDFSource, y_tolerance: float = 3.0):
        if not isinstance(source, bytes):
            source = Path(source)
            if not source.exists():
                raise FileNotFoundError(f"PDF not found: {source}")

        self.source = source
        self.y_tolerance = y_tolerance
        self._pages_cache: Optional[Dict[int, List[List[dict]]]] = None
        self._page_count: Optional[int] = None

    @property
    def page_count(self) -> int:
        if self._page_count is None:
            self._page_count = page_count(self.source) or 0
        return self._page_count

    def _extract_pages(self) -> Dict[int, List[List[dict]]]:
        """Extract characters from all pages, clustered into lines."""
        pages_data: Dict[int, List[List[dict]]] = {}

        with pdfplumber.open(_open_source(self.source)) as pdf:
            for page_num, page in enumerate(pdf.pages, start=1):
                pages_data[page_num] = cluster_by_y_tolerance(
                    page.chars, tolerance=self.y_tolerance
                )

        return pages_data

    def _ensure_loaded(self) -> None:
        """Lazily load page data if not already cached."""
        if self._pages_cache is None:
            self._pages_cache = self._extract_pages()

    def get_lines(self, page: int) -> List[str]:
        """Text lines of a page, top-to-bottom. Empty list if the page doesn't exist."""
        self._ensure_loaded()
        lines = []
        for char_objs in self._pages_cache.get(page, []):
            char_objs = sorted(char_objs, key=lambda c: c["x0"])
            lines.append("".join(c["text"] for c in char_objs))
        return lines

    def content_bottom(self, page: int) -> Optional[float]:
        """Lowest character edge on a page, or None if the page has no text."""
        self._ensure_loaded()
        lines = self._pages_cache.get(page, [])
        if not lines:
            return None
        return max(c["bottom"] for line in lines for c in line)
