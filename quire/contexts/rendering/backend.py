"""
ReportLab typesetting backend.

Implements both sides of the rendering contract:

- measure(): the measurement oracle. Wraps every block of the fully populated
  document at the frame width and lays them out in one continuous,
  unpaginated flow.
- render(): the final renderer. Builds the PDF with the page-break controls
  the simulator models and records where every block actually landed.

All lengths crossing this module's boundary are CSS pixels at 96 DPI.

The backend is a caller-owned handle:

    with ReportLabBackend(settings) as backend:
        measurements = backend.measure(content, strategy)
        rendered = backend.render(content, strategy, config, danger_zone_height)
"""

import io
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from reportlab.lib.fonts import addMapping
from reportlab.lib.pagesizes import A4
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.cidfonts import UnicodeCIDFont
from reportlab.platypus import BaseDocTemplate, Frame, PageTemplate
from reportlab.platypus.doctemplate import LayoutError
from typing_extensions import Protocol

from quire.contexts.layout.blocks import Measurement
from quire.contexts.layout.strategy import LayoutStrategy
from quire.contexts.rendering.content import ResumeContent
from quire.contexts.rendering.exceptions import RenderBackendError, TemplateRenderError
from quire.contexts.rendering.logger import _log_debug, _log_error
from quire.contexts.rendering.registries import TemplateRegistry
from quire.contexts.rendering.story import FontSet, StoryBuilder, paginate, pt, px
from quire.utils.config import LayoutSettings

# Height offered to blocks when measuring the unpaginated flow (points)
UNBOUNDED_HEIGHT = 1e6


@dataclass(frozen=True)
class Placement:
    """
    Where the renderer put a block.

    Attributes:
        block_id: Block id
        page: 1-based page number
        top_in_page: Offset of the block top from the top of the printable area (px)
        height: Block height (px)
    """

    block_id: str
    page: int
    top_in_page: float
    height: float

    @property
    def bottom_in_page(self) -> float:
        return self.top_in_page + self.height


@dataclass
class RenderedDocument:
    """Final PDF and the placement of every block in it."""

    pdf_bytes: bytes
    page_count: int
    placements: List[Placement] = field(default_factory=list)

    def placements_on(self, page: int) -> List[Placement]:
        return [placement for placement in self.placements if placement.page == page]

    def save(self, path) -> None:
        with open(path, "wb") as f:
            f.write(self.pdf_bytes)


class MeasurementOracle(Protocol):
    """Measures the fully populated document in one continuous flow."""

    def measure(self, content: ResumeContent, strategy: LayoutStrategy) -> List[Measurement]:
        ...


class FinalRenderer(Protocol):
    """Physically paginates the document with a chosen allocation."""

    def render(
        self,
        content: ResumeContent,
        strategy: LayoutStrategy,
        config: Sequence[int],
        danger_zone_height: float,
    ) -> RenderedDocument:
        ...


class ReportLabBackend:
    """
    Measurement oracle and final renderer on top of ReportLab platypus.

    Args:
        settings: Page geometry and fonts (default: LayoutSettings())
        registry: Markup templates (default: packaged templates)
    """

    def __init__(
        self,
        settings: Optional[LayoutSettings] = None,
        registry: Optional[TemplateRegistry] = None,
    ):
        self.settings = settings or LayoutSettings()
        self.registry = registry
        self.page_width, self.page_height = A4
        self.side_margin = pt(self.settings.side_margin_px)
        self.vertical_margin = pt(self.settings.page_margin_px)
        self.frame_width = self.page_width - 2 * self.side_margin
        self.frame_height = self.page_height - 2 * self.vertical_margin
        self._builder: Optional[StoryBuilder] = None

    # Lifecycle

    def open(self) -> "ReportLabBackend":
        """Register fonts and prepare styles and templates."""
        fonts = FontSet(body=self.settings.body_font, bold=self.settings.bold_font)
        if self.settings.cjk_font:
            fonts = self._register_cjk_font(self.settings.cjk_font)

        self._builder = StoryBuilder(self.frame_width, fonts, self.registry or TemplateRegistry())
        _log_debug(
            f"Backend opened: frame {px(self.frame_width):.1f}x{px(self.frame_height):.1f}px, "
            f"fonts {fonts.body}/{fonts.bold}"
        )
        return self

    def close(self) -> None:
        self._builder = None

    def __enter__(self) -> "ReportLabBackend":
        return self.open()

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    @property
    def is_open(self) -> bool:
        return self._builder is not None

    def _require_builder(self) -> StoryBuilder:
        if self._builder is None:
            raise RuntimeError("ReportLabBackend is not open; use it as a context manager or call open()")
        return self._builder

    @staticmethod
    def _register_cjk_font(font_name: str) -> FontSet:
        """Register a built-in CID font and map bold/italic to it (CID fonts have no variants)."""
        try:
            pdfmetrics.registerFont(UnicodeCIDFont(font_name))
        except KeyError as e:
            raise RenderBackendError(
                f"Unknown CID font '{font_name}'", operation="open", original_error=e
            ) from e
        for bold in (0, 1):
            for italic in (0, 1):
                addMapping(font_name, bold, italic, font_name)
        return FontSet(body=font_name, bold=font_name)

    # Measurement oracle

    def measure(self, content: ResumeContent, strategy: LayoutStrategy) -> List[Measurement]:
        """
        Measure the fully populated document as one continuous flow.

        Returns:
            One Measurement per block in document order, in px from document top

        Raises:
            RenderBackendError: If a block cannot be typeset
        """
        builder = self._require_builder()
        measurements = []
        bottom = 0.0
        previous_space_after = 0.0

        block_id = None
        try:
            for index, block in enumerate(builder.build_blocks(content, strategy)):
                block_id = block.block_id
                _, height = block.wrap(self.frame_width, UNBOUNDED_HEIGHT)
                top = 0.0 if index == 0 else bottom + previous_space_after + block.getSpaceBefore()
                measurements.append(Measurement(block_id=block_id, height=px(height), top=px(top)))
                bottom = top + height
                previous_space_after = block.getSpaceAfter()
        except (LayoutError, ValueError, TemplateRenderError) as e:
            _log_error(f"Measurement failed at {block_id}: {e}")
            raise RenderBackendError(
                "Failed to measure resume content",
                operation="measure",
                block_id=block_id,
                original_error=e,
            ) from e

        _log_debug(f"Measured {len(measurements)} blocks, flow height {px(bottom):.1f}px")
        return measurements

    # Final renderer

    def render(
        self,
        content: ResumeContent,
        strategy: LayoutStrategy,
        config: Sequence[int],
        danger_zone_height: float,
    ) -> RenderedDocument:
        """
        Typeset the document with `config[j]` bullets per job.

        Raises:
            RenderBackendError: If ReportLab cannot lay the document out
        """
        builder = self._require_builder()
        placements: List[Placement] = []
        frame_top = self.vertical_margin + self.frame_height

        def record(block_id: str, page: int, y: float, height: float) -> None:
            placements.append(
                Placement(
                    block_id=block_id,
                    page=page,
                    top_in_page=px(frame_top - (y + height)),
                    height=px(height),
                )
            )

        try:
            blocks = builder.build_blocks(content, strategy, config)
        except TemplateRenderError as e:
            _log_error(f"Render failed: {e}")
            raise RenderBackendError(
                "Failed to build resume markup",
                operation="render",
                original_error=e,
            ) from e
        for block in blocks:
            block.on_draw = record

        buffer = io.BytesIO()
        frame = Frame(
            self.side_margin, self.vertical_margin,
            self.frame_width, self.frame_height,
            leftPadding=0, rightPadding=0,
            topPadding=0, bottomPadding=0,
        )
        doc = BaseDocTemplate(
            buffer, pagesize=A4,
            leftMargin=self.side_margin, rightMargin=self.side_margin,
            topMargin=self.vertical_margin, bottomMargin=self.vertical_margin,
            title=content.name, author=content.name,
        )
        doc.addPageTemplates([PageTemplate(id="resume", frames=[frame])])

        try:
            doc.build(paginate(blocks, danger_zone_height))
        except (LayoutError, ValueError) as e:
            _log_error(f"Render failed: {e}")
            raise RenderBackendError(
                "ReportLab failed to lay out the resume",
                operation="render",
                original_error=e,
            ) from e

        page_count = doc.page
        return RenderedDocument(pdf_bytes=buffer.getvalue(), page_count=page_count, placements=placements)
