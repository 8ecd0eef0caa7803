"""Unit tests for greedy bullet allocation."""

import pytest

from quire.contexts.layout.allocator import allocate, seed_config
from quire.contexts.layout.blocks import BlockKind, LayoutBlock
from quire.contexts.layout.simulator import simulate


def _job(job, bullets, header_height=30.0, bullet_height=40.0):
    blocks = [LayoutBlock(BlockKind.JOB_HEADER, header_height, job_index=job, has_danger_zone_rule=True)]
    blocks.extend(
        LayoutBlock(BlockKind.JOB_BULLET, bullet_height, job_index=job, bullet_index=k)
        for k in range(bullets)
    )
    return blocks


def _three_jobs():
    """Static banner plus three jobs of eight 40px bullets (1150px of content in total)."""
    blocks = [LayoutBlock(BlockKind.STATIC, 100.0, label="header")]
    for job in range(3):
        blocks.extend(_job(job, 8))
    return blocks


@pytest.mark.unit
def test_seed_config():
    """Test that the first job is seeded richer and seeds are capped by availability."""
    assert seed_config([8, 2, 5]) == [6, 2, 4]
    assert seed_config([]) == []


@pytest.mark.unit
def test_allocation_fills_target_with_headroom():
    """Test that spare room is used for bullets beyond the seed."""
    blocks = _three_jobs()
    result = allocate(blocks, target_pages=2, page_height=500.0)

    assert result.fits
    assert result.simulation.page_count <= 2
    assert result.total_bullets > 9
    assert result.total_bullets < 24
    assert all(3 <= count <= 8 for count in result.config)


@pytest.mark.unit
def test_allocation_is_locally_maximal():
    """Test that no single extra bullet would still fit at the chosen danger zone."""
    blocks = _three_jobs()
    result = allocate(blocks, target_pages=2, page_height=500.0)

    for job, count in enumerate(result.config):
        if count == 8:
            continue
        bigger = list(result.config)
        bigger[job] += 1
        simulation = simulate(blocks, bigger, result.danger_zone_height, 500.0)
        assert simulation.page_count > 2


@pytest.mark.unit
def test_minimum_overflow_returns_floor_with_warning(log_messages):
    """Test that an impossible budget returns the floor allocation instead of raising."""
    blocks = _three_jobs()
    result = allocate(blocks, target_pages=1, page_height=500.0)

    assert not result.fits
    assert result.config == (3, 3, 3)
    assert result.simulation.page_count > 1
    assert any("Minimum config" in message for message in log_messages)


@pytest.mark.unit
def test_floor_capped_by_available_bullets():
    """Test that a job with fewer bullets than the floor keeps all it has."""
    blocks = [LayoutBlock(BlockKind.STATIC, 100.0)] + _job(0, 2) + _job(1, 8)
    result = allocate(blocks, target_pages=1, page_height=300.0)

    assert result.config[0] == 2
    assert result.config[1] >= 2


@pytest.mark.unit
def test_strict_danger_zone_kept_when_relaxed_adds_nothing():
    """Test that everything fitting under the strict zone keeps the strict zone."""
    blocks = [LayoutBlock(BlockKind.STATIC, 100.0)] + _job(0, 8, header_height=10.0, bullet_height=10.0)
    result = allocate(blocks, target_pages=1, page_height=250.0)

    assert result.config == (8,)
    assert result.danger_zone_height == 100.0
    # seed check, two growth steps, final simulation
    assert result.simulation_calls == 4


@pytest.mark.unit
def test_relaxed_danger_zone_adopted_when_it_adds_bullets():
    """Test that the relaxed zone is used when it lets more bullets in."""
    blocks = (
        [LayoutBlock(BlockKind.STATIC, 100.0)]
        + _job(0, 8, header_height=10.0, bullet_height=10.0)
        + [
            LayoutBlock(BlockKind.STATIC, 10.0, has_danger_zone_rule=True, label="section_title:skills"),
            LayoutBlock(BlockKind.STATIC, 10.0, label="skills_grid"),
        ]
    )
    result = allocate(blocks, target_pages=1, page_height=250.0)

    assert result.fits
    assert result.config == (8,)
    assert result.danger_zone_height == 60.0

    # Under the strict zone the same allocation would push the section title over
    assert simulate(blocks, result.config, 100.0, 250.0).page_count == 2


@pytest.mark.unit
def test_custom_thresholds():
    """Test that the danger zones and the floor come from the arguments."""
    simple = [LayoutBlock(BlockKind.STATIC, 100.0)] + _job(0, 8, header_height=10.0, bullet_height=10.0)
    result = allocate(simple, target_pages=1, page_height=250.0, strict_danger_zone=80.0, relaxed_danger_zone=50.0)
    assert result.danger_zone_height == 80.0

    overflowing = allocate(_three_jobs(), target_pages=1, page_height=300.0, min_bullets=1)
    assert overflowing.config == (1, 1, 1)
    assert not overflowing.fits
