"""
Post-render layout validation.

Re-measures the final PDF and reports layout problems the solver could not
rule out (danger-zone headers, orphaned job headers, a near-empty last page,
a page count off target). Validation is a safety net: it logs and returns its
findings and never fails the generation.
"""

from dataclasses import dataclass
from typing import List, Optional

from quire.contexts.rendering.backend import RenderedDocument
from quire.contexts.rendering.layout_diagnostics import DocumentDiagnostics, analyze_layout
from quire.contexts.rendering.logger import log_validation_result, log_validation_start
from quire.utils.config import LayoutSettings


@dataclass
class ValidationResult:
    """
    Result of layout validation.

    Attributes:
        is_valid: Whether the document passes all layout checks
        diagnostics: Layout diagnostics tree
        danger_zone_height: Danger zone the document was checked against
    """

    is_valid: bool
    diagnostics: DocumentDiagnostics
    danger_zone_height: float

    @property
    def issues(self) -> List[str]:
        """All issues from diagnostics hierarchy."""
        return self.diagnostics.get_inherited_issues()

    @property
    def page_count(self) -> int:
        """Actual page count from PDF."""
        return self.diagnostics.actual_page_count

    @property
    def last_page_fill(self) -> float:
        """Fill ratio of the last page (0.0 for an empty document)."""
        last_page = self.diagnostics.last_page
        return last_page.fill_ratio if last_page else 0.0


def validate_layout(
    rendered: RenderedDocument,
    target_pages: int,
    danger_zone_height: float,
    settings: Optional[LayoutSettings] = None,
    resume_name: str = "resume",
) -> ValidationResult:
    """
    Validate a rendered resume against its planned layout.

    The danger zone checked is the one the document was rendered with, so a
    document the allocator rendered with the relaxed zone is not flagged for
    headers in the band between the relaxed and strict zones.

    Args:
        rendered: Document returned by the backend's render()
        target_pages: Strategy's target page count
        danger_zone_height: Danger zone used for the render (px)
        settings: Layout settings (default: LayoutSettings())
        resume_name: Identifier for log messages

    Returns:
        ValidationResult (issues are also logged as warnings)

    Example:
        >>> result = validate_layout(rendered, target_pages=2, danger_zone_height=100)
        >>> if not result.is_valid:
        ...     print(result.issues)
    """
    settings = settings or LayoutSettings()

    log_validation_start(resume_name, target_pages, danger_zone_height)

    diagnostics = analyze_layout(
        rendered,
        intended_page_count=target_pages,
        danger_zone_height=danger_zone_height,
        page_height=settings.page_height,
        page_margin_px=settings.page_margin_px,
        fill_warning=settings.last_page_fill_warning,
    )

    result = ValidationResult(
        is_valid=diagnostics.is_valid,
        diagnostics=diagnostics,
        danger_zone_height=danger_zone_height,
    )

    log_validation_result(resume_name, result)

    return result
