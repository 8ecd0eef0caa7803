"""
Layout blocks.

The rendering backend measures the fully populated document once and reports
one Measurement per content block, identified by a block id string. The
extractor turns those measurements into the flat, ordered LayoutBlock list
that the simulator walks, inserting explicit Gap blocks for the vertical space
between consecutive blocks.

Block ids:
    header                      name and contact banner
    summary                     personal summary paragraph
    section_title:<name>        section heading ("education", "work", ...)
    education_item:<i>          one degree
    project_item:<i>            one project
    job_header:<j>              company/title/dates line of job j
    job_bullet:<j>:<k>          k-th bullet of job j (k is its priority rank)
    skills_grid                 the whole skills table
    certificate_item:<i>        one certificate
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence

from quire.contexts.layout.defaults import MIN_GAP_PX
from quire.contexts.layout.logger import _log_debug


@dataclass(frozen=True)
class BlockIdPatterns:
    """Block id formats shared by the backend (which emits them) and the extractor."""

    HEADER: str = "header"
    SUMMARY: str = "summary"
    SKILLS_GRID: str = "skills_grid"
    SECTION_TITLE: str = "section_title:{name}"
    EDUCATION_ITEM: str = "education_item:{index}"
    PROJECT_ITEM: str = "project_item:{index}"
    CERTIFICATE_ITEM: str = "certificate_item:{index}"
    JOB_HEADER: str = "job_header:{job}"
    JOB_BULLET: str = "job_bullet:{job}:{bullet}"

    JOB_HEADER_RE: re.Pattern = re.compile(r"^job_header:(\d+)$")
    JOB_BULLET_RE: re.Pattern = re.compile(r"^job_bullet:(\d+):(\d+)$")
    # Blocks that may not start inside the danger zone at the bottom of a page
    DANGER_ZONE_RE: re.Pattern = re.compile(
        r"^(section_title|education_item|project_item|job_header):"
    )


BLOCK_IDS = BlockIdPatterns()


class BlockKind(str, Enum):
    STATIC = "static"
    JOB_HEADER = "job_header"
    JOB_BULLET = "job_bullet"
    GAP = "gap"


@dataclass(frozen=True)
class Measurement:
    """
    One measured block from the continuous (unpaginated) flow.

    Attributes:
        block_id: Block id (see module docstring)
        height: Block height in px
        top: Offset from document top in px
    """

    block_id: str
    height: float
    top: float

    @property
    def bottom(self) -> float:
        return self.top + self.height


@dataclass(frozen=True)
class LayoutBlock:
    """
    A unit the simulator places on a page.

    Attributes:
        kind: STATIC, JOB_HEADER, JOB_BULLET or GAP
        height: Height in px
        job_index: Owning job (JOB_HEADER, JOB_BULLET, and GAPs before a bullet)
        bullet_index: Bullet rank (JOB_BULLET, and GAPs before a bullet)
        has_danger_zone_rule: Must not start in the danger zone
        label: Debug label (the block id, or "gap before <id>")
    """

    kind: BlockKind
    height: float
    job_index: Optional[int] = None
    bullet_index: Optional[int] = None
    has_danger_zone_rule: bool = False
    label: str = ""

    @property
    def is_prunable(self) -> bool:
        """True for bullets and the gaps that belong to them."""
        return self.bullet_index is not None and self.job_index is not None

    def __str__(self) -> str:
        return f"{self.kind.value:<10} {self.height:7.1f}px  {self.label}"


def _classify(block_id: str) -> LayoutBlock:
    """LayoutBlock (without gap handling) for a measured block id."""
    danger = bool(BLOCK_IDS.DANGER_ZONE_RE.match(block_id))

    match = BLOCK_IDS.JOB_HEADER_RE.match(block_id)
    if match:
        return LayoutBlock(
            kind=BlockKind.JOB_HEADER,
            height=0.0,
            job_index=int(match.group(1)),
            has_danger_zone_rule=True,
            label=block_id,
        )

    match = BLOCK_IDS.JOB_BULLET_RE.match(block_id)
    if match:
        return LayoutBlock(
            kind=BlockKind.JOB_BULLET,
            height=0.0,
            job_index=int(match.group(1)),
            bullet_index=int(match.group(2)),
            label=block_id,
        )

    return LayoutBlock(kind=BlockKind.STATIC, height=0.0, has_danger_zone_rule=danger, label=block_id)


def extract_blocks(measurements: Sequence[Measurement]) -> List[LayoutBlock]:
    """
    Convert a measurement pass into ordered layout blocks.

    Vertical space between consecutive blocks becomes a GAP block placed
    before the later one. A gap in front of a bullet carries that bullet's
    (job, bullet) indices so it disappears when the bullet is pruned.
    Space above the first block and gaps of 1 px or less are dropped.

    Args:
        measurements: Measurements in document order

    Returns:
        Layout blocks in document order
    """
    blocks: List[LayoutBlock] = []
    current_y = 0.0

    for measurement in measurements:
        block = _classify(measurement.block_id)

        gap = measurement.top - current_y
        if current_y > 0 and gap > MIN_GAP_PX:
            blocks.append(
                LayoutBlock(
                    kind=BlockKind.GAP,
                    height=gap,
                    job_index=block.job_index if block.kind is BlockKind.JOB_BULLET else None,
                    bullet_index=block.bullet_index,
                    label=f"gap before {measurement.block_id}",
                )
            )

        blocks.append(
            LayoutBlock(
                kind=block.kind,
                height=measurement.height,
                job_index=block.job_index,
                bullet_index=block.bullet_index,
                has_danger_zone_rule=block.has_danger_zone_rule,
                label=block.label,
            )
        )
        current_y = measurement.bottom

    _log_debug(f"Extracted {len(blocks)} layout blocks from {len(measurements)} measurements")
    return blocks


def max_bullets_per_job(blocks: Sequence[LayoutBlock], job_count: Optional[int] = None) -> List[int]:
    """
    Number of bullets available for each job (highest bullet rank + 1).

    Args:
        blocks: Extracted layout blocks
        job_count: Jobs in the document (default: inferred from the blocks)

    Returns:
        One count per job; 0 for a job without measured bullets
    """
    job_indices = [block.job_index for block in blocks if block.job_index is not None]
    if job_count is None:
        job_count = max(job_indices) + 1 if job_indices else 0

    counts = [0] * job_count
    for block in blocks:
        if block.kind is BlockKind.JOB_BULLET and block.job_index < job_count:
            counts[block.job_index] = max(counts[block.job_index], block.bullet_index + 1)
    return counts


def static_height(blocks: Sequence[LayoutBlock]) -> float:
    """Total height that does not depend on the allocation (everything but bullets and their gaps)."""
    return sum(block.height for block in blocks if not block.is_prunable)
