"""
Story building for the ReportLab backend.

Turns ResumeContent into an ordered list of BlockFlowables, one per layout
block, each tagged with the block id the layout solver knows it by. The same
block list serves both measurement (wrapped one by one in a continuous flow)
and the final render (wrapped in page-break controls that mirror the
simulator's rules).

Spacing is declared per block as space before/after and then folded into the
spaceBefore of the following block, so the gap between two blocks is always
`current.spaceBefore`, in the measured flow and on the page alike.
"""

from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from reportlab.lib.colors import HexColor
from reportlab.lib.enums import TA_CENTER, TA_LEFT, TA_RIGHT
from reportlab.lib.styles import ParagraphStyle
from reportlab.platypus import CondPageBreak, Flowable, KeepTogether, Paragraph, Table, TableStyle

from quire.contexts.layout.blocks import BLOCK_IDS
from quire.contexts.layout.strategy import LayoutStrategy
from quire.contexts.rendering.content import JobContent, ResumeContent
from quire.contexts.rendering.registries import TemplateRegistry

# CSS pixels are 1/96 in, PDF points 1/72 in
PX_PER_PT = 96.0 / 72.0

# --- Colors ---
TEXT = HexColor("#222222")
MUTED = HexColor("#555555")
ACCENT = HexColor("#1F4E79")

# --- Font sizes (in points) ---
NAME_SIZE = 18
HEADLINE_SIZE = 11
CONTACT_SIZE = 8.5
SECTION_TITLE_SIZE = 11
COMPANY_SIZE = 10
BODY_SIZE = 9.5
DETAIL_SIZE = 8.5

# --- Spacing (in points) ---
SPACE_AFTER_HEADER = 6
SPACE_BEFORE_SECTION = 10
SPACE_AFTER_SECTION_TITLE = 4
SPACE_BEFORE_JOB = 6
SPACE_AFTER_JOB_HEADER = 2
SPACE_AFTER_BULLET = 1.5
SPACE_AFTER_ITEM = 3
BULLET_INDENT = 10
BULLET_CHAR = "•"

SECTION_TITLES = {
    "summary": "Summary",
    "education": "Education",
    "work": "Work Experience",
    "projects": "Projects",
    "skills": "Skills",
    "certificates": "Certificates",
}

PlacementCallback = Callable[[str, int, float, float], None]


def px(points: float) -> float:
    return points * PX_PER_PT


def pt(pixels: float) -> float:
    return pixels / PX_PER_PT


class BlockFlowable(Flowable):
    """
    A measurable, unsplittable layout block.

    Wraps the flowable that draws the block and reports where it was drawn
    (page number, bottom y and height in points) to `on_draw`.
    """

    def __init__(
        self,
        block_id: str,
        inner: Flowable,
        space_before: float = 0,
        space_after: float = 0,
        job_index: Optional[int] = None,
        bullet_index: Optional[int] = None,
    ):
        Flowable.__init__(self)
        self.block_id = block_id
        self.inner = inner
        self.spaceBefore = space_before
        self.spaceAfter = space_after
        self.job_index = job_index
        self.bullet_index = bullet_index
        self.on_draw: Optional[PlacementCallback] = None

    @property
    def has_danger_zone_rule(self) -> bool:
        return bool(BLOCK_IDS.DANGER_ZONE_RE.match(self.block_id))

    @property
    def is_job_header(self) -> bool:
        return bool(BLOCK_IDS.JOB_HEADER_RE.match(self.block_id))

    @property
    def is_job_bullet(self) -> bool:
        return self.bullet_index is not None

    def wrap(self, availWidth, availHeight):
        self.width, self.height = self.inner.wrapOn(getattr(self, "canv", None), availWidth, availHeight)
        return self.width, self.height

    def split(self, availWidth, availHeight):
        # Blocks move to the next page whole, like the simulator assumes
        return []

    def draw(self):
        self.inner.drawOn(self.canv, 0, 0)

    def drawOn(self, canvas, x, y, _sW=0):
        if self.on_draw is not None:
            self.on_draw(self.block_id, canvas.getPageNumber(), y, self.height)
        Flowable.drawOn(self, canvas, x, y, _sW)

    def __repr__(self) -> str:
        return f"BlockFlowable({self.block_id!r})"


@dataclass
class FontSet:
    body: str = "Helvetica"
    bold: str = "Helvetica-Bold"


def build_styles(fonts: FontSet) -> dict:
    """Build all ParagraphStyles used in the resume."""
    styles = {}
    styles["name"] = ParagraphStyle(
        "name", fontName=fonts.bold, fontSize=NAME_SIZE,
        textColor=ACCENT, alignment=TA_CENTER, leading=NAME_SIZE + 4,
    )
    styles["headline"] = ParagraphStyle(
        "headline", fontName=fonts.body, fontSize=HEADLINE_SIZE,
        textColor=TEXT, alignment=TA_CENTER, leading=HEADLINE_SIZE + 3,
    )
    styles["contact"] = ParagraphStyle(
        "contact", fontName=fonts.body, fontSize=CONTACT_SIZE,
        textColor=MUTED, alignment=TA_CENTER, leading=CONTACT_SIZE + 3,
    )
    styles["section_title"] = ParagraphStyle(
        "section_title", fontName=fonts.bold, fontSize=SECTION_TITLE_SIZE,
        textColor=ACCENT, alignment=TA_LEFT, leading=SECTION_TITLE_SIZE + 3,
    )
    styles["company"] = ParagraphStyle(
        "company", fontName=fonts.body, fontSize=COMPANY_SIZE,
        textColor=TEXT, alignment=TA_LEFT, leading=COMPANY_SIZE + 3,
    )
    styles["dates"] = ParagraphStyle(
        "dates", fontName=fonts.body, fontSize=DETAIL_SIZE,
        textColor=MUTED, alignment=TA_RIGHT, leading=COMPANY_SIZE + 3,
    )
    styles["bullet"] = ParagraphStyle(
        "bullet", fontName=fonts.body, fontSize=BODY_SIZE,
        textColor=TEXT, alignment=TA_LEFT, leading=BODY_SIZE + 3,
        leftIndent=BULLET_INDENT, bulletIndent=2, bulletFontName=fonts.body,
    )
    styles["body"] = ParagraphStyle(
        "body", fontName=fonts.body, fontSize=BODY_SIZE,
        textColor=TEXT, alignment=TA_LEFT, leading=BODY_SIZE + 3.5,
    )
    styles["skill"] = ParagraphStyle(
        "skill", fontName=fonts.body, fontSize=BODY_SIZE,
        textColor=TEXT, alignment=TA_LEFT, leading=BODY_SIZE + 3,
    )
    return styles


def _attach_space_before(blocks: List[BlockFlowable]) -> List[BlockFlowable]:
    """
    Move each block's spaceAfter onto the following block's spaceBefore.

    Frames overlap attached space (max of the two) unless a zero-size flowable
    such as CondPageBreak sits between the blocks, while the measurement flow
    adds them. With only spaceBefore in play both give the same gap, and the
    gap disappears at the top of a page as the simulator expects.
    """
    for previous, block in zip(blocks, blocks[1:]):
        block.spaceBefore += previous.spaceAfter
        previous.spaceAfter = 0
    if blocks:
        blocks[-1].spaceAfter = 0
    return blocks


def _plain_table(rows, col_widths, valign: str = "TOP") -> Table:
    table = Table(rows, colWidths=col_widths)
    table.setStyle(TableStyle([
        ("VALIGN", (0, 0), (-1, -1), valign),
        ("LEFTPADDING", (0, 0), (-1, -1), 0),
        ("RIGHTPADDING", (0, 0), (-1, -1), 0),
        ("TOPPADDING", (0, 0), (-1, -1), 0),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 0),
    ]))
    return table


class StoryBuilder:
    """
    Builds block flowables for a resume at a given frame width.

    Args:
        frame_width: Printable width in points
        fonts: Body and bold font names (already registered)
        registry: Markup templates (default: packaged templates)
    """

    def __init__(self, frame_width: float, fonts: FontSet, registry: Optional[TemplateRegistry] = None):
        self.frame_width = frame_width
        self.fonts = fonts
        self.styles = build_styles(fonts)
        self.registry = registry or TemplateRegistry()

    def _para(self, template: str, style: str, bullet: Optional[str] = None, **context) -> Paragraph:
        return Paragraph(self.registry.render(template, **context), self.styles[style], bulletText=bullet)

    def _section_title(self, key: str) -> BlockFlowable:
        return BlockFlowable(
            BLOCK_IDS.SECTION_TITLE.format(name=key),
            self._para("section_title", "section_title", title=SECTION_TITLES[key]),
            space_before=SPACE_BEFORE_SECTION,
            space_after=SPACE_AFTER_SECTION_TITLE,
        )

    def _two_column_row(self, left: Paragraph, right: Paragraph) -> Table:
        return _plain_table(
            [[left, right]],
            [self.frame_width * 0.72, self.frame_width * 0.28],
            valign="BOTTOM",
        )

    def _header(self, content: ResumeContent) -> BlockFlowable:
        rows = [[self._para("name", "name", name=content.name)]]
        if content.headline:
            rows.append([self._para("paragraph", "headline", text=content.headline)])
        if content.contact:
            rows.append([self._para("contact", "contact", items=content.contact)])
        return BlockFlowable(
            BLOCK_IDS.HEADER,
            _plain_table(rows, [self.frame_width]),
            space_after=SPACE_AFTER_HEADER,
        )

    def _job_blocks(self, job_index: int, job: JobContent, bullet_count: int) -> List[BlockFlowable]:
        blocks = [
            BlockFlowable(
                BLOCK_IDS.JOB_HEADER.format(job=job_index),
                self._two_column_row(
                    self._para("job_header", "company", job=job),
                    self._para("date_range", "dates", start_date=job.start_date, end_date=job.end_date),
                ),
                space_before=SPACE_BEFORE_JOB,
                space_after=SPACE_AFTER_JOB_HEADER,
                job_index=job_index,
            )
        ]
        for bullet_index, text in enumerate(job.bullets[:bullet_count]):
            blocks.append(
                BlockFlowable(
                    BLOCK_IDS.JOB_BULLET.format(job=job_index, bullet=bullet_index),
                    self._para("paragraph", "bullet", bullet=BULLET_CHAR, text=text),
                    space_after=SPACE_AFTER_BULLET,
                    job_index=job_index,
                    bullet_index=bullet_index,
                )
            )
        return blocks

    def _skills_grid(self, content: ResumeContent, strategy: LayoutStrategy) -> Optional[BlockFlowable]:
        categories = [c for c in content.skills if c.items][: strategy.skill_categories]
        if not categories:
            return None

        columns = max(1, strategy.skill_columns)
        cells = [
            self._para(
                "skill_category", "skill",
                category=category, items=category.items[: strategy.skill_items_per_cat],
            )
            for category in categories
        ]
        rows = [cells[i : i + columns] for i in range(0, len(cells), columns)]
        rows[-1] = rows[-1] + [""] * (columns - len(rows[-1]))

        table = _plain_table(rows, [self.frame_width / columns] * columns)
        table.setStyle(TableStyle([
            ("RIGHTPADDING", (0, 0), (-1, -1), 6),
            ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
        ]))
        return BlockFlowable(BLOCK_IDS.SKILLS_GRID, table)

    def build_blocks(
        self,
        content: ResumeContent,
        strategy: LayoutStrategy,
        config: Optional[Sequence[int]] = None,
    ) -> List[BlockFlowable]:
        """
        Block flowables in document order.

        Args:
            content: Authored resume content
            strategy: Layout strategy (shapes the skills grid)
            config: Bullets kept per job (default: all of them)

        Returns:
            Flat list of fresh BlockFlowables
        """
        if config is None:
            config = content.max_bullets

        blocks = [self._header(content)]

        if content.summary:
            blocks.append(self._section_title("summary"))
            blocks.append(
                BlockFlowable(BLOCK_IDS.SUMMARY, self._para("paragraph", "body", text=content.summary))
            )

        if content.education:
            blocks.append(self._section_title("education"))
            for index, education in enumerate(content.education):
                blocks.append(
                    BlockFlowable(
                        BLOCK_IDS.EDUCATION_ITEM.format(index=index),
                        self._two_column_row(
                            self._para(
                                "education_item", "company",
                                education=education, detail_size=DETAIL_SIZE,
                            ),
                            self._para(
                                "date_range", "dates",
                                start_date=education.start_date, end_date=education.end_date,
                            ),
                        ),
                        space_after=SPACE_AFTER_ITEM,
                    )
                )

        if content.jobs:
            blocks.append(self._section_title("work"))
            for job_index, job in enumerate(content.jobs):
                bullet_count = config[job_index] if job_index < len(config) else 0
                blocks.extend(self._job_blocks(job_index, job, bullet_count))

        if content.projects:
            blocks.append(self._section_title("projects"))
            for index, project in enumerate(content.projects):
                blocks.append(
                    BlockFlowable(
                        BLOCK_IDS.PROJECT_ITEM.format(index=index),
                        self._para("project_item", "body", project=project),
                        space_after=SPACE_AFTER_ITEM,
                    )
                )

        skills_grid = self._skills_grid(content, strategy)
        if skills_grid is not None:
            blocks.append(self._section_title("skills"))
            blocks.append(skills_grid)

        if content.certificates:
            blocks.append(self._section_title("certificates"))
            for index, certificate in enumerate(content.certificates):
                blocks.append(
                    BlockFlowable(
                        BLOCK_IDS.CERTIFICATE_ITEM.format(index=index),
                        self._para("paragraph", "body", text=certificate),
                        space_after=SPACE_AFTER_BULLET,
                    )
                )

        return _attach_space_before(blocks)


def paginate(blocks: Sequence[BlockFlowable], danger_zone_height: float) -> List[Flowable]:
    """
    Wrap blocks in the page-break controls the simulator models.

    - A danger-zone block is preceded by a CondPageBreak, so it moves to the
      next page when less than the danger zone (plus its own space before)
      remains.
    - A job header is kept together with its first bullet.

    Args:
        blocks: Block flowables in document order
        danger_zone_height: Danger zone in px

    Returns:
        Flowables ready for doc.build()
    """
    story: List[Flowable] = []
    position = 0

    while position < len(blocks):
        block = blocks[position]
        if block.has_danger_zone_rule:
            story.append(CondPageBreak(pt(danger_zone_height) + block.spaceBefore))

        following = blocks[position + 1] if position + 1 < len(blocks) else None
        if (
            block.is_job_header
            and following is not None
            and following.is_job_bullet
            and following.job_index == block.job_index
        ):
            story.append(KeepTogether([block, following]))
            position += 2
            continue

        story.append(block)
        position += 1

    return story
