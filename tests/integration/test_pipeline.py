"""
Integration test for the full generation pipeline.
Tests: work history -> timeline -> content -> measure -> allocate -> render -> validate -> PDF on disk.
"""

import pytest

from quire.contexts.layout.strategy import LayoutStrategy
from quire.contexts.rendering.backend import ReportLabBackend
from quire.contexts.rendering.content import TargetJob, YAMLContentProvider
from quire.contexts.timeline.data_structures import SynthesisReason
from quire.pipeline import generate_resume
from quire.utils.config import LayoutSettings
from quire.utils.pdf_processing import page_count


@pytest.mark.integration
def test_generate_resume_end_to_end(tmp_path, resume_document, today, log_messages):
    """Test one generation from authored YAML content to a validated PDF."""
    provider = YAMLContentProvider(resume_document)
    output_path = tmp_path / "results" / "jane.pdf"

    with ReportLabBackend(LayoutSettings()) as backend:
        result = generate_resume(
            provider.work_entries(),
            provider.education_entries(),
            TargetJob(title="Staff Engineer", experience_requirement="5+ years"),
            provider,
            backend,
            today=today,
            output_path=output_path,
            resume_name="jane",
        )

    assert output_path.exists()
    assert result.pdf_path == output_path
    assert page_count(output_path) == result.rendered.page_count

    assert result.strategy.target_pages == 2
    assert result.allocation.fits
    assert result.rendered.page_count <= result.strategy.target_pages
    assert len(result.allocation.config) == 3
    assert all(3 <= count <= 8 for count in result.allocation.config)
    assert sum(result.allocation.config) > 9
    assert result.validation.danger_zone_height == result.allocation.danger_zone_height

    assert any(message.startswith("[timeline]") for message in log_messages)
    assert any(message.startswith("[layout]") for message in log_messages)
    assert any(message.startswith("[render]") for message in log_messages)


@pytest.mark.integration
def test_generate_resume_with_synthesized_history(resume_document, today):
    """Test that a shortfall is covered by a prepended job printed last."""
    provider = YAMLContentProvider(resume_document)

    with ReportLabBackend() as backend:
        result = generate_resume(
            provider.work_entries(),
            provider.education_entries(),
            TargetJob(title="Principal Engineer", experience_requirement="12+ years"),
            provider,
            backend,
            today=today,
        )

    assert result.pdf_path is None
    assert [s.reason for s in result.timeline.supplement_segments] == [SynthesisReason.PREPEND]
    assert result.content.jobs[-1].synthesized
    assert result.content.jobs[-1].company == "Freelance"
    assert result.strategy == LayoutStrategy(3, 1, 4, 4)
