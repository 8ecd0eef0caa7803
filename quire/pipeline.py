"""
Resume generation pipeline.

One generation request, run sequentially:

    reconcile timeline -> provide content -> select strategy -> measure once
    -> allocate bullets (in-memory simulations) -> render once -> validate

The backend is owned by the caller and passed in open; the pipeline never
creates or closes it, so one backend can serve many requests.

Example:
    >>> provider = YAMLContentProvider("data/jane.yaml")
    >>> with ReportLabBackend(settings) as backend:
    ...     result = generate_resume(
    ...         provider.work_entries(),
    ...         provider.education_entries(),
    ...         TargetJob(title="Staff Engineer", experience_requirement="8+ years"),
    ...         provider,
    ...         backend,
    ...         settings=settings,
    ...         output_path=Path("outs/results/jane.pdf"),
    ...     )
    >>> result.rendered.page_count == result.strategy.target_pages
    True
"""

import time
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import List, Optional, Sequence

from loguru import logger
from typing_extensions import Protocol

from quire.contexts.layout.allocator import AllocationResult, allocate
from quire.contexts.layout.blocks import LayoutBlock, extract_blocks, static_height
from quire.contexts.layout.logger import log_solver_report, log_strategy
from quire.contexts.layout.strategy import LayoutStrategy, select_layout_strategy
from quire.contexts.rendering.backend import FinalRenderer, MeasurementOracle, RenderedDocument
from quire.contexts.rendering.content import ContentProvider, ResumeContent, TargetJob
from quire.contexts.rendering.logger import log_render_result, log_render_start
from quire.contexts.rendering.validator import ValidationResult, validate_layout
from quire.contexts.timeline.data_structures import EducationEntry, TimelineResult, WorkEntry
from quire.contexts.timeline.reconciler import reconcile_timeline
from quire.utils.config import LayoutSettings
from quire.utils.timestamp import format_elapsed

CONTEXT_PREFIX = "[pipeline]"


class LayoutBackend(MeasurementOracle, FinalRenderer, Protocol):
    """A backend that can both measure and render."""


@dataclass
class GenerationResult:
    """
    Everything one generation produced.

    Attributes:
        timeline: Reconciled work history
        content: Content the document was built from (full bullet surplus)
        strategy: Page budget and skills-grid shape
        blocks: Layout blocks from the measurement pass
        allocation: Chosen bullets per job and danger-zone height
        rendered: Final PDF and block placements
        validation: Post-render layout check
        pdf_path: Where the PDF was written (None if not saved)
        elapsed: Wall time of the whole generation in seconds
    """

    timeline: TimelineResult
    content: ResumeContent
    strategy: LayoutStrategy
    blocks: List[LayoutBlock]
    allocation: AllocationResult
    rendered: RenderedDocument
    validation: ValidationResult
    pdf_path: Optional[Path] = None
    elapsed: float = 0.0

    @property
    def page_count(self) -> int:
        return self.validation.page_count


def generate_resume(
    work_entries: Sequence[WorkEntry],
    education_entries: Sequence[EducationEntry],
    target_job: TargetJob,
    provider: ContentProvider,
    backend: LayoutBackend,
    settings: Optional[LayoutSettings] = None,
    birthday: Optional[str] = None,
    today: Optional[date] = None,
    output_path: Optional[Path] = None,
    resume_name: str = "resume",
) -> GenerationResult:
    """
    Run one resume generation end to end.

    Args:
        work_entries: Candidate's real jobs
        education_entries: Candidate's degrees
        target_job: Posting to tailor for (its experience requirement drives the timeline)
        provider: Content provider for the reconciled timeline
        backend: Open measurement oracle and final renderer
        settings: Layout settings (default: LayoutSettings())
        birthday: Candidate birthday, used only for the timeline floor date
        today: Reference date for the timeline (default: resolved at call time)
        output_path: Write the PDF here if given (parent directories are created)
        resume_name: Identifier for log messages

    Returns:
        GenerationResult

    Raises:
        RenderBackendError: If the backend fails to measure or render
    """
    settings = settings or LayoutSettings()
    start_time = time.time()

    timeline = reconcile_timeline(
        work_entries,
        education_entries,
        requirement=target_job.experience_requirement,
        birthday=birthday,
        today=today,
        gap_threshold_months=settings.gap_threshold_months,
        fallback_floor_date=settings.fallback_floor_date,
    )

    content = provider.provide(timeline, target_job)

    strategy = select_layout_strategy(content.job_count, content.has_certificates)
    log_strategy(content.job_count, content.has_certificates, strategy)

    blocks = extract_blocks(backend.measure(content, strategy))

    allocation = allocate(
        blocks,
        strategy.target_pages,
        max_bullets=content.max_bullets,
        page_height=settings.page_height,
        strict_danger_zone=settings.strict_danger_zone,
        relaxed_danger_zone=settings.relaxed_danger_zone,
        min_bullets=settings.min_bullets,
        first_job_seed=settings.first_job_seed,
        other_job_seed=settings.other_job_seed,
    )
    log_solver_report(static_height(blocks), settings.page_height, strategy.target_pages, allocation)

    log_render_start(resume_name, allocation.config, allocation.danger_zone_height)
    render_start = time.time()
    rendered = backend.render(content, strategy, allocation.config, allocation.danger_zone_height)
    log_render_result(resume_name, rendered, time.time() - render_start)

    validation = validate_layout(
        rendered,
        strategy.target_pages,
        allocation.danger_zone_height,
        settings=settings,
        resume_name=resume_name,
    )

    pdf_path = None
    if output_path is not None:
        pdf_path = Path(output_path)
        pdf_path.parent.mkdir(parents=True, exist_ok=True)
        rendered.save(pdf_path)
        logger.debug(f"{CONTEXT_PREFIX} PDF written to {pdf_path}")

    elapsed = time.time() - start_time
    logger.info(
        f"{CONTEXT_PREFIX} {resume_name}: {rendered.page_count} page(s), "
        f"{allocation.total_bullets} bullets, {format_elapsed(elapsed)}"
    )

    return GenerationResult(
        timeline=timeline,
        content=content,
        strategy=strategy,
        blocks=blocks,
        allocation=allocation,
        rendered=rendered,
        validation=validation,
        pdf_path=pdf_path,
        elapsed=elapsed,
    )
