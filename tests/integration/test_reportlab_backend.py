"""
Integration tests for the ReportLab backend.
Tests: authored content -> measurement flow -> layout blocks, and allocation -> PDF -> placements.
"""

import shutil

import pytest

from quire.contexts.layout.allocator import allocate
from quire.contexts.layout.blocks import BLOCK_IDS, BlockKind, extract_blocks, max_bullets_per_job
from quire.contexts.layout.strategy import select_layout_strategy
from quire.contexts.rendering.backend import ReportLabBackend
from quire.contexts.rendering.content import JobContent, ResumeContent, TargetJob, YAMLContentProvider
from quire.contexts.rendering.exceptions import RenderBackendError
from quire.contexts.rendering.registries import TEMPLATES_PATH, TemplateRegistry
from quire.contexts.timeline.reconciler import reconcile_timeline
from quire.utils.config import LayoutSettings
from quire.utils.pdf_processing import PDFDocument, page_count


@pytest.fixture
def content(resume_document, today):
    provider = YAMLContentProvider(resume_document)
    timeline = reconcile_timeline(
        provider.work_entries(), provider.education_entries(), requirement="5+ years", today=today
    )
    return provider.provide(timeline, TargetJob(title="Staff Engineer"))


@pytest.fixture
def backend():
    with ReportLabBackend(LayoutSettings()) as opened:
        yield opened


@pytest.mark.integration
def test_measure_reports_every_block_in_order(backend, content):
    """Test that the measurement pass covers all bullets in one continuous flow."""
    strategy = select_layout_strategy(content.job_count, content.has_certificates)
    measurements = backend.measure(content, strategy)

    assert measurements[0].block_id == BLOCK_IDS.HEADER
    assert measurements[0].top == 0
    tops = [measurement.top for measurement in measurements]
    assert tops == sorted(tops)
    assert all(measurement.height > 0 for measurement in measurements)

    block_ids = {measurement.block_id for measurement in measurements}
    assert "skills_grid" in block_ids
    assert "job_bullet:2:7" in block_ids

    blocks = extract_blocks(measurements)
    assert max_bullets_per_job(blocks) == [8, 8, 8]
    assert any(block.kind is BlockKind.GAP for block in blocks)


@pytest.mark.integration
def test_render_keeps_only_allocated_bullets(backend, content):
    """Test that the final render prints exactly the allocated bullets."""
    strategy = select_layout_strategy(content.job_count, content.has_certificates)
    rendered = backend.render(content, strategy, [3, 2, 1], danger_zone_height=100)

    assert rendered.pdf_bytes.startswith(b"%PDF")
    assert page_count(rendered.pdf_bytes) == rendered.page_count

    bullets = [p.block_id for p in rendered.placements if BLOCK_IDS.JOB_BULLET_RE.match(p.block_id)]
    assert bullets == [
        "job_bullet:0:0", "job_bullet:0:1", "job_bullet:0:2",
        "job_bullet:1:0", "job_bullet:1:1",
        "job_bullet:2:0",
    ]
    header = rendered.placements[0]
    assert header.block_id == "header"
    assert header.page == 1
    assert header.top_in_page == pytest.approx(0, abs=0.5)


@pytest.mark.integration
def test_render_heights_match_measurement(backend, content):
    """Test that blocks are typeset at the heights the measurement pass reported."""
    strategy = select_layout_strategy(content.job_count, content.has_certificates)
    measured = {m.block_id: m.height for m in backend.measure(content, strategy)}
    rendered = backend.render(content, strategy, content.max_bullets, danger_zone_height=100)

    for placement in rendered.placements:
        assert placement.height == pytest.approx(measured[placement.block_id], abs=0.01)


@pytest.mark.integration
def test_simulated_page_count_matches_render(backend, content):
    """Test that the render lands on the page count the simulator predicted."""
    strategy = select_layout_strategy(content.job_count, content.has_certificates)
    blocks = extract_blocks(backend.measure(content, strategy))
    allocation = allocate(blocks, target_pages=1)
    rendered = backend.render(content, strategy, allocation.config, allocation.danger_zone_height)

    assert allocation.fits
    assert rendered.page_count == allocation.simulation.page_count == 1
    pdf = PDFDocument(rendered.pdf_bytes)
    assert pdf.page_count == 1
    assert any("Jane Doe" in line for line in pdf.get_lines(1))


@pytest.mark.integration
def test_backend_must_be_open(content):
    """Test that using a closed backend is an error."""
    backend = ReportLabBackend()
    strategy = select_layout_strategy(content.job_count, content.has_certificates)

    assert not backend.is_open
    with pytest.raises(RuntimeError):
        backend.measure(content, strategy)


@pytest.mark.integration
def test_unknown_cjk_font_raises():
    """Test that an unknown CID font surfaces as RenderBackendError."""
    backend = ReportLabBackend(LayoutSettings(cjk_font="NoSuchCIDFont"))

    with pytest.raises(RenderBackendError) as exc_info:
        backend.open()

    assert exc_info.value.operation == "open"
    assert isinstance(exc_info.value.original_error, KeyError)


@pytest.mark.integration
def test_measure_minimal_resume(backend):
    """Test that a resume with only a name and one job measures and renders."""
    content = ResumeContent(
        name="Jane",
        jobs=[JobContent("Acme", "Engineer", "2021-03", "present", bullets=["One", "Two", "Three", "Four"])],
    )
    strategy = select_layout_strategy(content.job_count, content.has_certificates)

    measurements = backend.measure(content, strategy)
    assert measurements[0].block_id == BLOCK_IDS.HEADER
    assert measurements[0].height > 0

    rendered = backend.render(content, strategy, [4], danger_zone_height=100)
    assert rendered.page_count == 1


@pytest.mark.integration
def test_template_failure_raises_backend_error(tmp_path, content):
    """Test that a broken markup template surfaces as RenderBackendError."""
    templates = tmp_path / "templates"
    shutil.copytree(TEMPLATES_PATH, templates)
    (templates / "name.xml.jinja").write_text("{{ full_name }}\n")
    strategy = select_layout_strategy(content.job_count, content.has_certificates)

    with ReportLabBackend(registry=TemplateRegistry(templates)) as broken:
        with pytest.raises(RenderBackendError) as exc_info:
            broken.measure(content, strategy)
        assert exc_info.value.operation == "measure"

        with pytest.raises(RenderBackendError) as exc_info:
            broken.render(content, strategy, [3, 3, 3], danger_zone_height=100)
        assert exc_info.value.operation == "render"
