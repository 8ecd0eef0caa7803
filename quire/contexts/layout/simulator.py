"""
In-memory page simulation.

Replays the page-breaking rules of the renderer over measured block heights,
so the allocator can evaluate thousands of bullet allocations without
rendering. Pure and deterministic: the same inputs always give the same result.

Rules:
- Bullets beyond a job's allocation (and the gaps in front of them) are skipped.
- A job header travels with the gaps after it and its first surviving bullet.
- A danger-zone block never starts within `danger_zone_height` of the page bottom.
- A block (or header group) that would cross the page bottom moves to the next page.
- A break is never taken on an empty page; an oversized block just overflows it.
- A gap at the top of a fresh page takes no space.
"""

from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

from quire.contexts.layout.blocks import BlockKind, LayoutBlock
from quire.contexts.layout.defaults import PAGE_HEIGHT


@dataclass(frozen=True)
class SimulationResult:
    """
    Outcome of one simulated pagination.

    Attributes:
        page_count: Pages used
        last_page_fill_height: Height used on the last page in px
        page_heights: Height used on every page in px
    """

    page_count: int
    last_page_fill_height: float
    page_heights: Tuple[float, ...] = field(default_factory=tuple)

    def last_page_fill_ratio(self, page_height: float = PAGE_HEIGHT) -> float:
        return self.last_page_fill_height / page_height if page_height > 0 else 0.0

    def total_used(self, page_height: float = PAGE_HEIGHT) -> float:
        """Full pages before the last one plus the last page's fill."""
        return (self.page_count - 1) * page_height + self.last_page_fill_height


def _allowed(config: Sequence[int], job_index: int) -> int:
    if 0 <= job_index < len(config):
        return config[job_index]
    return 0


def active_blocks(blocks: Sequence[LayoutBlock], config: Sequence[int]) -> List[LayoutBlock]:
    """Blocks that survive the allocation, in document order."""
    return [
        block
        for block in blocks
        if not block.is_prunable or block.bullet_index < _allowed(config, block.job_index)
    ]


def _header_group_height(active: Sequence[LayoutBlock], position: int) -> float:
    """Height of the header at `position` plus following gaps and its first bullet, if any."""
    header = active[position]
    group_height = header.height
    pending_gaps = 0.0

    for block in active[position + 1 :]:
        if block.kind is BlockKind.GAP:
            pending_gaps += block.height
            continue
        if block.kind is BlockKind.JOB_BULLET and block.job_index == header.job_index:
            group_height += pending_gaps + block.height
        break

    return group_height


def simulate(
    blocks: Sequence[LayoutBlock],
    config: Sequence[int],
    danger_zone_height: float,
    page_height: float = PAGE_HEIGHT,
) -> SimulationResult:
    """
    Simulate pagination of `blocks` with `config[j]` leading bullets kept for job j.

    Args:
        blocks: Layout blocks from extract_blocks()
        config: Bullets kept per job (missing jobs keep none)
        danger_zone_height: Bottom band in px where danger-zone blocks may not start
        page_height: Printable page height in px

    Returns:
        SimulationResult with page count and last-page fill

    Example:
        >>> result = simulate(blocks, [6, 4, 4], danger_zone_height=100)
        >>> result.page_count <= 2
        True
    """
    active = active_blocks(blocks, config)

    page_heights: List[float] = []
    current_y = 0.0

    for position, block in enumerate(active):
        if block.kind is BlockKind.GAP and current_y == 0:
            continue

        group_height = block.height
        if block.kind is BlockKind.JOB_HEADER:
            group_height = _header_group_height(active, position)

        if (
            block.has_danger_zone_rule
            and current_y > 0
            and page_height - current_y < danger_zone_height
        ):
            page_heights.append(current_y)
            current_y = 0.0

        if current_y > 0 and current_y + group_height > page_height:
            page_heights.append(current_y)
            current_y = 0.0 if block.kind is BlockKind.GAP else block.height
        else:
            current_y += block.height

    page_heights.append(current_y)

    return SimulationResult(
        page_count=len(page_heights),
        last_page_fill_height=current_y,
        page_heights=tuple(page_heights),
    )
