"""
Layout diagnostics for rendered resumes.

Compares the final PDF against the layout the solver planned for, using the
block placements recorded by the renderer and the text extents pdfplumber
finds in the PDF itself.

Detection capabilities:
- Page count different from the strategy's target
- Danger-zone blocks (section titles, job headers, ...) starting in the
  bottom band of a page
- Job headers separated from their first bullet
- Near-empty last page on a multi-page document

Fill of the last page is measured from the PDF (lowest character on the page)
rather than from the placements, so trailing whitespace in a block does not
count as content.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from quire.contexts.layout.blocks import BLOCK_IDS
from quire.contexts.layout.defaults import LAST_PAGE_FILL_WARNING, PAGE_HEIGHT
from quire.contexts.rendering.backend import Placement, RenderedDocument
from quire.contexts.rendering.logger import _log_warning
from quire.contexts.rendering.story import px
from quire.utils.pdf_processing import PDFDocument, page_count


class IssueTemplates:
    """Centralized issue message templates (f-string style)."""

    # Document-level
    PAGE_COUNT_MISMATCH = "Page count mismatch: {actual} (expected {intended})"

    # Page-level
    LAST_PAGE_UNDERFILLED = (
        "Last page (page {page}) is only {fill:.0%} full (warning below {threshold:.0%})"
    )

    # Block-level
    IN_DANGER_ZONE = (
        "'{block}' on page {page} starts {distance:.0f}px above the page bottom "
        "(danger zone {danger_zone:g}px)"
    )
    SEPARATED_FROM_FIRST_BULLET = (
        "'{block}' on page {page} is separated from its first bullet (page {bullet_page})"
    )


# =============================================================================
# Diagnostics Hierarchy
# =============================================================================


@dataclass
class Diagnostics:
    """Base class for hierarchical diagnostics."""

    components: List["Diagnostics"] = field(default_factory=list)

    def get_issues(self) -> List[str]:
        """Generate issues for this level based on field values. Override in subclasses."""
        return []

    def get_inherited_issues(self) -> List[str]:
        """Collect issues from this level and all descendants."""
        all_issues = list(self.get_issues())
        for component in self.components:
            all_issues.extend(component.get_inherited_issues())
        return all_issues

    @property
    def is_valid(self) -> bool:
        """True if no issues at this level or any descendant."""
        return len(self.get_inherited_issues()) == 0


@dataclass
class BlockDiagnostics(Diagnostics):
    """Diagnostics for one danger-zone block (section title, job header, ...)."""

    block_id: str = ""
    page: int = 0
    top_in_page: float = 0.0
    page_height: float = PAGE_HEIGHT
    danger_zone_height: float = 0.0
    first_bullet_page: Optional[int] = None  # Job headers only; None = no bullets

    @property
    def distance_to_bottom(self) -> float:
        return self.page_height - self.top_in_page

    @property
    def in_danger_zone(self) -> bool:
        return self.top_in_page > 0 and self.distance_to_bottom < self.danger_zone_height

    def get_issues(self) -> List[str]:
        issues = []
        if self.in_danger_zone:
            issues.append(
                IssueTemplates.IN_DANGER_ZONE.format(
                    block=self.block_id,
                    page=self.page,
                    distance=self.distance_to_bottom,
                    danger_zone=self.danger_zone_height,
                )
            )
        if self.first_bullet_page is not None and self.first_bullet_page != self.page:
            issues.append(
                IssueTemplates.SEPARATED_FROM_FIRST_BULLET.format(
                    block=self.block_id,
                    page=self.page,
                    bullet_page=self.first_bullet_page,
                )
            )
        return issues


@dataclass
class PageDiagnostics(Diagnostics):
    """Diagnostics for a single rendered page."""

    page_number: int = 0
    fill_height: float = 0.0
    page_height: float = PAGE_HEIGHT
    is_last_page: bool = False
    check_fill: bool = False  # Only the last page of a multi-page document
    fill_warning: float = LAST_PAGE_FILL_WARNING

    @property
    def fill_ratio(self) -> float:
        return self.fill_height / self.page_height if self.page_height > 0 else 0.0

    def get_issues(self) -> List[str]:
        issues = []
        if self.check_fill and self.fill_ratio < self.fill_warning:
            issues.append(
                IssueTemplates.LAST_PAGE_UNDERFILLED.format(
                    page=self.page_number,
                    fill=self.fill_ratio,
                    threshold=self.fill_warning,
                )
            )
        return issues


@dataclass
class DocumentDiagnostics(Diagnostics):
    """Top-level diagnostics for the entire document."""

    actual_page_count: int = 0
    intended_page_count: int = 0

    def get_issues(self) -> List[str]:
        issues = []
        if self.actual_page_count != self.intended_page_count:
            issues.append(
                IssueTemplates.PAGE_COUNT_MISMATCH.format(
                    actual=self.actual_page_count,
                    intended=self.intended_page_count,
                )
            )
        return issues

    @property
    def last_page(self) -> Optional[PageDiagnostics]:
        return self.components[-1] if self.components else None


# =============================================================================
# Helper Functions
# =============================================================================


def _first_bullet_pages(placements: List[Placement]) -> Dict[int, int]:
    """Page of bullet 0 for every job that has one."""
    pages = {}
    for placement in placements:
        match = BLOCK_IDS.JOB_BULLET_RE.match(placement.block_id)
        if match and int(match.group(2)) == 0:
            pages[int(match.group(1))] = placement.page
    return pages


def _measure_last_page_fill(
    rendered: RenderedDocument, last_page: int, page_margin_px: float
) -> Optional[float]:
    """
    Height used on the last page, from the lowest character pdfplumber finds.

    Returns None if the PDF cannot be read, 0.0 if the page has no text.
    """
    try:
        pdf = PDFDocument(rendered.pdf_bytes)
        bottom = pdf.content_bottom(last_page)
    except Exception as e:
        _log_warning(f"Could not read rendered PDF for fill measurement: {e}")
        return None
    if bottom is None:
        return 0.0
    return max(0.0, px(bottom) - page_margin_px)


def _placement_fill(placements: List[Placement], page: int) -> float:
    return max((p.bottom_in_page for p in placements if p.page == page), default=0.0)


# =============================================================================
# Main Analysis Function
# =============================================================================


def analyze_layout(
    rendered: RenderedDocument,
    intended_page_count: int,
    danger_zone_height: float,
    page_height: float = PAGE_HEIGHT,
    page_margin_px: float = 40.0,
    fill_warning: float = LAST_PAGE_FILL_WARNING,
) -> DocumentDiagnostics:
    """
    Analyze a rendered document against the planned layout.

    Builds a diagnostics tree (Document -> Page -> Block). Page count comes
    from the PDF itself (PyPDF2), falling back to the renderer's count if the
    PDF cannot be read.

    Args:
        rendered: Document returned by the backend's render()
        intended_page_count: Strategy's target page count
        danger_zone_height: Danger zone the document was rendered with (px)
        page_height: Printable page height (px)
        page_margin_px: Top margin (px), to convert PDF coordinates to printable-area offsets
        fill_warning: Last-page fill ratio below which a multi-page document is flagged

    Returns:
        DocumentDiagnostics tree. Call .get_inherited_issues() for all issues,
        or .is_valid to check if document passes validation.
    """
    actual_page_count = page_count(rendered.pdf_bytes) or rendered.page_count

    document_diagnostics = DocumentDiagnostics(
        actual_page_count=actual_page_count,
        intended_page_count=intended_page_count,
    )

    first_bullet_pages = _first_bullet_pages(rendered.placements)

    for page_number in range(1, actual_page_count + 1):
        is_last_page = page_number == actual_page_count

        fill_height = _placement_fill(rendered.placements, page_number)
        if is_last_page:
            measured = _measure_last_page_fill(rendered, page_number, page_margin_px)
            if measured is not None:
                fill_height = measured

        page_diagnostics = PageDiagnostics(
            page_number=page_number,
            fill_height=fill_height,
            page_height=page_height,
            is_last_page=is_last_page,
            check_fill=is_last_page and actual_page_count > 1,
            fill_warning=fill_warning,
        )

        for placement in rendered.placements_on(page_number):
            if not BLOCK_IDS.DANGER_ZONE_RE.match(placement.block_id):
                continue
            header_match = BLOCK_IDS.JOB_HEADER_RE.match(placement.block_id)
            page_diagnostics.components.append(
                BlockDiagnostics(
                    block_id=placement.block_id,
                    page=page_number,
                    top_in_page=placement.top_in_page,
                    page_height=page_height,
                    danger_zone_height=danger_zone_height,
                    first_bullet_page=(
                        first_bullet_pages.get(int(header_match.group(1))) if header_match else None
                    ),
                )
            )

        document_diagnostics.components.append(page_diagnostics)

    return document_diagnostics
