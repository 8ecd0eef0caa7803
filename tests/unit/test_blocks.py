"""Unit tests for measurement-to-block extraction."""

import pytest

from quire.contexts.layout.blocks import (
    BLOCK_IDS,
    BlockKind,
    Measurement,
    extract_blocks,
    max_bullets_per_job,
    static_height,
)


def _measurements():
    return [
        Measurement("header", height=50, top=0),
        Measurement("section_title:work", height=20, top=60),
        Measurement("job_header:0", height=15, top=85),
        Measurement("job_bullet:0:0", height=12, top=102),
        Measurement("job_bullet:0:1", height=12, top=114.5),
    ]


@pytest.mark.unit
def test_extract_blocks_inserts_gaps():
    """Test block kinds and gap insertion in document order."""
    blocks = extract_blocks(_measurements())

    assert [block.kind for block in blocks] == [
        BlockKind.STATIC,
        BlockKind.GAP,
        BlockKind.STATIC,
        BlockKind.GAP,
        BlockKind.JOB_HEADER,
        BlockKind.GAP,
        BlockKind.JOB_BULLET,
        BlockKind.JOB_BULLET,
    ]
    assert [block.height for block in blocks if block.kind is BlockKind.GAP] == [10, 5, 2]


@pytest.mark.unit
def test_gap_before_bullet_belongs_to_bullet():
    """Test that the gap in front of a bullet is pruned with it."""
    blocks = extract_blocks(_measurements())
    gap = blocks[5]

    assert gap.job_index == 0
    assert gap.bullet_index == 0
    assert gap.is_prunable
    assert not blocks[1].is_prunable
    assert not blocks[3].is_prunable


@pytest.mark.unit
def test_danger_zone_rule_flags():
    """Test which blocks may not start in the danger zone."""
    blocks = {block.label: block for block in extract_blocks(_measurements())}

    assert blocks["section_title:work"].has_danger_zone_rule
    assert blocks["job_header:0"].has_danger_zone_rule
    assert not blocks["header"].has_danger_zone_rule
    assert not blocks["job_bullet:0:0"].has_danger_zone_rule


@pytest.mark.unit
def test_leading_space_and_tiny_gaps_dropped():
    """Test that space above the first block and sub-pixel gaps produce no gap blocks."""
    measurements = [
        Measurement("header", height=50, top=20),
        Measurement("summary", height=30, top=70.5),
    ]
    blocks = extract_blocks(measurements)

    assert [block.kind for block in blocks] == [BlockKind.STATIC, BlockKind.STATIC]


@pytest.mark.unit
def test_max_bullets_and_static_height():
    """Test available bullets per job and allocation-independent height."""
    blocks = extract_blocks(_measurements())

    assert max_bullets_per_job(blocks) == [2]
    assert max_bullets_per_job(blocks, job_count=2) == [2, 0]
    assert static_height(blocks) == pytest.approx(50 + 10 + 20 + 5 + 15)


@pytest.mark.unit
def test_block_id_formats_round_trip_through_patterns():
    """Test that emitted ids are recognized by the shared patterns."""
    header_id = BLOCK_IDS.JOB_HEADER.format(job=3)
    bullet_id = BLOCK_IDS.JOB_BULLET.format(job=3, bullet=7)

    assert BLOCK_IDS.JOB_HEADER_RE.match(header_id).group(1) == "3"
    assert BLOCK_IDS.JOB_BULLET_RE.match(bullet_id).groups() == ("3", "7")
    assert BLOCK_IDS.DANGER_ZONE_RE.match(BLOCK_IDS.EDUCATION_ITEM.format(index=0))
    assert not BLOCK_IDS.DANGER_ZONE_RE.match(BLOCK_IDS.CERTIFICATE_ITEM.format(index=0))
