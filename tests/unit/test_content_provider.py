"""Unit tests for the YAML content provider."""

import pytest
from omegaconf import OmegaConf

from quire.contexts.rendering.content import (
    JobContent,
    TargetJob,
    YAMLContentProvider,
    load_resume_document,
)
from quire.contexts.timeline.reconciler import reconcile_timeline


@pytest.mark.unit
def test_entries_from_document(resume_document):
    """Test that work and education entries are read from the document."""
    provider = YAMLContentProvider(resume_document)

    work = provider.work_entries()
    assert [entry.company for entry in work] == ["Acme Corp", "Globex", "Initech"]
    assert work[0].end_date == "present"
    assert provider.education_entries()[0].start_date == "2012-09"
    assert provider.birthday is None


@pytest.mark.unit
def test_provide_follows_timeline_order(resume_document, today):
    """Test that jobs follow the reconciled timeline, newest first, with every bullet."""
    provider = YAMLContentProvider(resume_document)
    timeline = reconcile_timeline(
        provider.work_entries(), provider.education_entries(), requirement="5+ years", today=today
    )
    content = provider.provide(timeline, TargetJob(title="Staff Engineer"))

    assert [job.company for job in content.jobs] == ["Acme Corp", "Globex", "Initech"]
    assert content.max_bullets == [8, 8, 8]
    assert content.job_count == 3
    assert not content.has_certificates
    assert content.headline == "Backend Engineer"


@pytest.mark.unit
def test_synthesized_segments_take_pool_content(resume_document, today):
    """Test that a synthesized segment gets authored pool content and timeline dates."""
    resume_document["work"][1]["end_date"] = "2020-06"
    provider = YAMLContentProvider(resume_document)
    timeline = reconcile_timeline(provider.work_entries(), provider.education_entries(), today=today)
    content = provider.provide(timeline, TargetJob())

    synthesized = [job for job in content.jobs if job.synthesized]
    assert len(synthesized) == 1
    assert synthesized[0].company == "Freelance"
    assert synthesized[0].start_date == "2020-07"
    assert synthesized[0].end_date == "2021-02"
    assert [job.company for job in content.jobs] == ["Acme Corp", "Freelance", "Globex", "Initech"]


@pytest.mark.unit
def test_exhausted_pool_reuses_last_entry(resume_document, today, log_messages):
    """Test that every synthesized segment is printed once the pool runs out."""
    resume_document["work"][1]["end_date"] = "2020-06"
    resume_document["work"][2]["end_date"] = "2017-06"
    provider = YAMLContentProvider(resume_document)
    timeline = reconcile_timeline(provider.work_entries(), provider.education_entries(), today=today)
    content = provider.provide(timeline, TargetJob())

    assert [job.company for job in content.jobs] == ["Acme Corp", "Freelance", "Globex", "Freelance", "Initech"]
    assert [(job.start_date, job.end_date) for job in content.jobs if job.synthesized] == [
        ("2020-07", "2021-02"),
        ("2017-07", "2018-06"),
    ]
    assert content.max_bullets[3] == 5
    assert any("pool exhausted" in message for message in log_messages)


@pytest.mark.unit
def test_synthesized_segment_without_pool_prints_header(resume_document, today, log_messages):
    """Test that a synthesized segment with no authored pool keeps its header and dates."""
    resume_document["synthesized_jobs"] = []
    resume_document["work"][1]["end_date"] = "2020-06"
    provider = YAMLContentProvider(resume_document)
    timeline = reconcile_timeline(provider.work_entries(), provider.education_entries(), today=today)
    content = provider.provide(timeline, TargetJob(title="Backend Engineer"))

    assert content.job_count == 4
    filler = content.jobs[1]
    assert filler.synthesized
    assert filler.company == ""
    assert filler.title == "Backend Engineer"
    assert (filler.start_date, filler.end_date) == ("2020-07", "2021-02")
    assert content.max_bullets == [8, 0, 8, 8]
    assert any("printing header only" in message for message in log_messages)


@pytest.mark.unit
def test_load_resume_document(tmp_path, resume_document):
    """Test loading an authored resume from YAML."""
    yaml_path = tmp_path / "jane.yaml"
    OmegaConf.save(OmegaConf.create(resume_document), yaml_path)

    document = load_resume_document(yaml_path)
    assert document["name"] == "Jane Doe"
    assert YAMLContentProvider(yaml_path).work_entries()[1].start_date == "2018-07"


@pytest.mark.unit
def test_load_resume_document_missing(tmp_path):
    """Test that a missing resume file raises FileNotFoundError."""
    with pytest.raises(FileNotFoundError):
        load_resume_document(tmp_path / "missing.yaml")


@pytest.mark.unit
def test_job_date_range():
    """Test the printed date range of a job."""
    assert JobContent("Acme", "Engineer", "2021-03", "present").date_range == "2021-03 - Present"
    assert JobContent("Acme", "Engineer", "2019-01", "2021-02").date_range == "2019-01 - 2021-02"
