"""
Greedy bullet allocation.

Searches for how many leading bullets to keep per job so the document fills
exactly the target page count. Every candidate is checked with the in-memory
simulator; nothing is rendered here.

Search:
1. Seed the first job with 6 bullets and the others with 4 (capped by what exists).
2. If the seed overflows, remove bullets from the last job backwards (never
   below 3 per job) until it fits.
3. Add bullets round-robin, keeping each one only if the document still fits,
   until a full pass adds nothing (100 px danger zone).
4. Repeat step 3 with the relaxed 60 px danger zone. If that adds anything the
   document is rendered with the relaxed zone.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from quire.contexts.layout.blocks import LayoutBlock, max_bullets_per_job
from quire.contexts.layout.defaults import (
    FIRST_JOB_SEED,
    MIN_BULLETS,
    OTHER_JOB_SEED,
    PAGE_HEIGHT,
    RELAXED_DANGER_ZONE,
    STRICT_DANGER_ZONE,
)
from quire.contexts.layout.logger import _log_debug, _log_info, _log_warning
from quire.contexts.layout.simulator import SimulationResult, simulate


@dataclass(frozen=True)
class AllocationResult:
    """
    Chosen allocation and the threshold the renderer must use with it.

    Attributes:
        config: Bullets kept per job
        danger_zone_height: Danger zone the document must be rendered with
        simulation: Simulation of the final config
        simulation_calls: Simulations run during the search
        fits: Whether the final config fits the target page count
    """

    config: Tuple[int, ...]
    danger_zone_height: float
    simulation: SimulationResult
    simulation_calls: int
    fits: bool = True

    @property
    def total_bullets(self) -> int:
        return sum(self.config)


class _Search:
    """Simulation wrapper that counts calls and compares against the page budget."""

    def __init__(self, blocks: Sequence[LayoutBlock], target_pages: int, page_height: float):
        self.blocks = blocks
        self.target_pages = target_pages
        self.page_height = page_height
        self.calls = 0

    def run(self, config: Sequence[int], danger_zone_height: float) -> SimulationResult:
        self.calls += 1
        return simulate(self.blocks, config, danger_zone_height, self.page_height)

    def fits(self, config: Sequence[int], danger_zone_height: float) -> bool:
        return self.run(config, danger_zone_height).page_count <= self.target_pages


def seed_config(
    max_bullets: Sequence[int],
    first_job_seed: int = FIRST_JOB_SEED,
    other_job_seed: int = OTHER_JOB_SEED,
) -> List[int]:
    """Starting allocation: first job richer than the rest, capped by available bullets."""
    return [
        min(first_job_seed if job == 0 else other_job_seed, available)
        for job, available in enumerate(max_bullets)
    ]


def _shrink(
    search: _Search, config: List[int], floors: Sequence[int], danger_zone_height: float
) -> bool:
    """Remove bullets from the last job backwards until the config fits. Returns whether it fits."""
    while True:
        removed_any = False
        for job in reversed(range(len(config))):
            if config[job] <= floors[job]:
                continue
            config[job] -= 1
            removed_any = True
            if search.fits(config, danger_zone_height):
                return True
        if not removed_any:
            return False


def _grow(
    search: _Search, config: List[int], max_bullets: Sequence[int], danger_zone_height: float
) -> int:
    """Round-robin single-bullet increments kept only while the config fits. Returns bullets added."""
    added = 0
    changed = True
    while changed:
        changed = False
        for job in range(len(config)):
            if config[job] >= max_bullets[job]:
                continue
            config[job] += 1
            if search.fits(config, danger_zone_height):
                added += 1
                changed = True
            else:
                config[job] -= 1
    return added


def allocate(
    blocks: Sequence[LayoutBlock],
    target_pages: int,
    max_bullets: Optional[Sequence[int]] = None,
    page_height: float = PAGE_HEIGHT,
    strict_danger_zone: float = STRICT_DANGER_ZONE,
    relaxed_danger_zone: float = RELAXED_DANGER_ZONE,
    min_bullets: int = MIN_BULLETS,
    first_job_seed: int = FIRST_JOB_SEED,
    other_job_seed: int = OTHER_JOB_SEED,
) -> AllocationResult:
    """
    Find the per-job bullet counts that best fill `target_pages`.

    Never raises for an unsatisfiable layout: if even the minimum allocation
    overflows, that minimum is returned (fits=False) and a warning is logged.

    Args:
        blocks: Layout blocks from one full-content measurement pass
        target_pages: Page budget from the layout strategy
        max_bullets: Bullets available per job (default: read from the blocks)
        page_height: Printable page height in px
        strict_danger_zone: Danger zone used for shrinking and the first growth round
        relaxed_danger_zone: Danger zone tried in the second growth round
        min_bullets: Per-job floor when shrinking (capped by available bullets)
        first_job_seed: Starting bullets for the first (most recent) job
        other_job_seed: Starting bullets for every other job

    Returns:
        AllocationResult with the config and the danger zone to render with

    Example:
        >>> result = allocate(blocks, target_pages=2)
        >>> result.fits, result.danger_zone_height in (100.0, 60.0)
        (True, True)
    """
    if max_bullets is None:
        max_bullets = max_bullets_per_job(blocks)
    max_bullets = list(max_bullets)

    search = _Search(blocks, target_pages, page_height)
    config = seed_config(max_bullets, first_job_seed, other_job_seed)
    floors = [min(min_bullets, available) for available in max_bullets]
    danger_zone_height = strict_danger_zone

    _log_debug(f"Seed config {config}, available {max_bullets}, target {target_pages} page(s)")

    if not search.fits(config, strict_danger_zone):
        _log_info(f"Seed config {config} exceeds {target_pages} page(s); pruning")
        if not _shrink(search, config, floors, strict_danger_zone):
            simulation = search.run(config, strict_danger_zone)
            _log_warning(
                f"Minimum config {config} still needs {simulation.page_count} page(s) "
                f"(target {target_pages}); rendering it anyway"
            )
            return AllocationResult(
                config=tuple(config),
                danger_zone_height=strict_danger_zone,
                simulation=simulation,
                simulation_calls=search.calls,
                fits=False,
            )

    strict_added = _grow(search, config, max_bullets, strict_danger_zone)
    _log_debug(f"Strict round ({strict_danger_zone:g}px) added {strict_added} bullet(s): {config}")

    relaxed_added = _grow(search, config, max_bullets, relaxed_danger_zone)
    if relaxed_added:
        danger_zone_height = relaxed_danger_zone
        _log_debug(f"Relaxed round ({relaxed_danger_zone:g}px) added {relaxed_added} bullet(s): {config}")

    simulation = search.run(config, danger_zone_height)
    return AllocationResult(
        config=tuple(config),
        danger_zone_height=danger_zone_height,
        simulation=simulation,
        simulation_calls=search.calls,
        fits=simulation.page_count <= target_pages,
    )
