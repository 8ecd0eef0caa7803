"""
Resume Content Structure

Authored resume content handed to the rendering backend, plus the Content
Provider seam that turns a reconciled timeline into that content.

Content generation itself (prompting, retries, validation of authored text) is
owned by the provider. The YAML provider shipped here reads already-authored
content from a file, which is what the CLI and the tests use.

YAML layout:

    name: Jane Doe
    headline: Backend Engineer
    contact: [jane@example.com, "+1 555 0100"]
    summary: ...
    education:
      - {school: ..., degree: ..., start_date: 2014-09, end_date: 2018-06}
    work:                       # real history, in any order
      - {company: ..., title: ..., start_date: 2021-03, end_date: present,
         bullets: [...]}        # most important bullet first
    synthesized_jobs:           # authored content for synthesized segments
      - {company: ..., title: ..., bullets: [...]}
    projects:
      - {name: ..., description: ...}
    skills:
      - {name: Languages, items: [Python, Go, SQL]}
    certificates: [...]
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from omegaconf import OmegaConf
from typing_extensions import Protocol

from quire.contexts.rendering.logger import _log_debug, _log_warning
from quire.contexts.timeline.data_structures import (
    EducationEntry,
    TimelineResult,
    TimelineSegment,
    WorkEntry,
)


@dataclass
class TargetJob:
    """The posting the resume is tailored to."""

    title: str = ""
    company: str = ""
    experience_requirement: str = ""
    description: str = ""


@dataclass
class JobContent:
    """
    One job as it will be printed.

    Attributes:
        company: Employer name
        title: Job title
        start_date: "YYYY-MM"
        end_date: "YYYY-MM" or "present"
        bullets: Responsibilities, most important first
        synthesized: True if the job covers a synthesized timeline segment
    """

    company: str
    title: str
    start_date: str
    end_date: str
    bullets: List[str] = field(default_factory=list)
    synthesized: bool = False

    @property
    def date_range(self) -> str:
        end = "Present" if self.end_date.lower() == "present" else self.end_date
        return f"{self.start_date} - {end}"


@dataclass
class EducationContent:
    school: str
    degree: str = ""
    start_date: str = ""
    end_date: str = ""
    details: str = ""


@dataclass
class ProjectContent:
    name: str
    description: str = ""


@dataclass
class SkillCategory:
    name: str
    items: List[str] = field(default_factory=list)


@dataclass
class ResumeContent:
    """
    Fully authored resume, with every job's complete bullet surplus.

    The layout solver decides how many bullets of each job are printed; the
    content itself is never trimmed.
    """

    name: str
    headline: str = ""
    contact: List[str] = field(default_factory=list)
    summary: str = ""
    education: List[EducationContent] = field(default_factory=list)
    jobs: List[JobContent] = field(default_factory=list)
    projects: List[ProjectContent] = field(default_factory=list)
    skills: List[SkillCategory] = field(default_factory=list)
    certificates: List[str] = field(default_factory=list)

    @property
    def job_count(self) -> int:
        return len(self.jobs)

    @property
    def has_certificates(self) -> bool:
        return len(self.certificates) > 0

    @property
    def max_bullets(self) -> List[int]:
        return [len(job.bullets) for job in self.jobs]


class ContentProvider(Protocol):
    """Produces authored content consistent with a reconciled timeline."""

    def provide(self, timeline: TimelineResult, job: TargetJob) -> ResumeContent:
        ...


def _as_list(value: Any) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def load_resume_document(yaml_path: Union[str, Path]) -> Dict[str, Any]:
    """Load a resume YAML file into plain containers."""
    yaml_path = Path(yaml_path)
    if not yaml_path.exists():
        raise FileNotFoundError(f"Resume YAML not found: {yaml_path}")

    yaml_data = OmegaConf.load(yaml_path)
    return OmegaConf.to_container(yaml_data, resolve=True) or {}


class YAMLContentProvider:
    """
    Content provider backed by an authored YAML document.

    Existing timeline segments take the matching `work` entry (by index);
    synthesized segments take `synthesized_jobs` entries in order. Dates always
    come from the timeline, so printed dates match the reconciled history.

    Example:
        >>> provider = YAMLContentProvider("data/jane.yaml")
        >>> timeline = reconcile_timeline(provider.work_entries(), provider.education_entries(), "5+ years")
        >>> content = provider.provide(timeline, TargetJob(title="Staff Engineer"))
    """

    def __init__(self, source: Union[str, Path, Dict[str, Any]]):
        if isinstance(source, dict):
            self.document = source
            self.source_path: Optional[Path] = None
        else:
            self.source_path = Path(source)
            self.document = load_resume_document(self.source_path)

    def work_entries(self) -> List[WorkEntry]:
        return [WorkEntry.from_dict(item) for item in _as_list(self.document.get("work"))]

    def education_entries(self) -> List[EducationEntry]:
        return [EducationEntry.from_dict(item) for item in _as_list(self.document.get("education"))]

    @property
    def birthday(self) -> Optional[str]:
        value = self.document.get("birthday")
        return str(value) if value else None

    def _existing_job(self, segment: TimelineSegment) -> JobContent:
        work = _as_list(self.document.get("work"))
        item = work[segment.index]
        return JobContent(
            company=str(item.get("company", "")),
            title=str(item.get("title", "")),
            start_date=segment.start_date,
            end_date=segment.end_date,
            bullets=[str(bullet) for bullet in _as_list(item.get("bullets"))],
        )

    def _synthesized_job(self, segment: TimelineSegment, item: Dict[str, Any]) -> JobContent:
        return JobContent(
            company=str(item.get("company", "")),
            title=str(item.get("title", "")),
            start_date=segment.start_date,
            end_date=segment.end_date,
            bullets=[str(bullet) for bullet in _as_list(item.get("bullets"))],
            synthesized=True,
        )

    def provide(self, timeline: TimelineResult, job: TargetJob) -> ResumeContent:
        """
        Build resume content for `timeline`, newest job first.

        Synthesized segments take `synthesized_jobs` entries in order. Once the
        pool runs out the last entry is reused; with no pool at all the segment
        is printed as a header with the target title and no bullets.
        """
        pool = list(_as_list(self.document.get("synthesized_jobs")))
        jobs = []
        last_item = None

        for segment in timeline.segments:
            if not segment.is_synthesized:
                jobs.append(self._existing_job(segment))
                continue
            if pool:
                last_item = pool.pop(0)
            elif last_item is not None:
                _log_warning(f"Synthesized job pool exhausted; reusing the last entry for {segment}")
            else:
                _log_warning(f"No authored content for synthesized segment {segment}; printing header only")
            jobs.append(self._synthesized_job(segment, last_item or {"title": job.title}))

        skills = [
            SkillCategory(name=str(item.get("name", "")), items=[str(s) for s in _as_list(item.get("items"))])
            for item in _as_list(self.document.get("skills"))
        ]

        content = ResumeContent(
            name=str(self.document.get("name", "")),
            headline=str(self.document.get("headline") or job.title or ""),
            contact=[str(item) for item in _as_list(self.document.get("contact"))],
            summary=str(self.document.get("summary") or ""),
            education=[
                EducationContent(
                    school=str(item.get("school", "")),
                    degree=str(item.get("degree", "")),
                    start_date=str(item.get("start_date") or ""),
                    end_date=str(item.get("end_date") or ""),
                    details=str(item.get("details") or ""),
                )
                for item in _as_list(self.document.get("education"))
            ],
            jobs=jobs,
            projects=[
                ProjectContent(name=str(item.get("name", "")), description=str(item.get("description") or ""))
                for item in _as_list(self.document.get("projects"))
            ],
            skills=skills,
            certificates=[str(item) for item in _as_list(self.document.get("certificates"))],
        )
        _log_debug(
            f"Content for '{job.title or 'untitled'}': {content.job_count} jobs, "
            f"bullets available {content.max_bullets}"
        )
        return content
