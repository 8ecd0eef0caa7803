"""Unit tests for TemplateRegistry class."""

import pytest
from jinja2 import TemplateNotFound

from quire.contexts.rendering.content import JobContent
from quire.contexts.rendering.exceptions import TemplateRenderError
from quire.contexts.rendering.registries import TEMPLATES_PATH, TemplateRegistry


@pytest.mark.unit
def test_template_registry_init():
    """Test TemplateRegistry initialization."""
    registry = TemplateRegistry()
    assert registry.templates_path == TEMPLATES_PATH
    assert registry.templates_path.exists()
    assert registry._cache == {}


@pytest.mark.unit
def test_template_caching():
    """Test that templates are cached after first load."""
    registry = TemplateRegistry()

    template1 = registry.get_template("job_header")
    assert registry.is_cached("job_header")

    template2 = registry.get_template("job_header")
    assert template1 is template2


@pytest.mark.unit
def test_get_template_not_found():
    """Test error handling for missing template."""
    registry = TemplateRegistry()

    with pytest.raises(TemplateNotFound):
        registry.get_template("nonexistent_block")


@pytest.mark.unit
def test_clear_cache():
    """Test cache clearing."""
    registry = TemplateRegistry()

    registry.get_template("paragraph")
    assert len(registry._cache) == 1

    registry.clear_cache()
    assert len(registry._cache) == 0


@pytest.mark.unit
def test_user_text_is_escaped():
    """Test that markup characters in content are not read as paragraph markup."""
    registry = TemplateRegistry()

    rendered = registry.render("paragraph", text="Cut p99 latency to <5ms for R&D")
    assert rendered == "Cut p99 latency to &lt;5ms for R&amp;D"


@pytest.mark.unit
def test_job_header_markup():
    """Test company and title markup with the bold company name."""
    registry = TemplateRegistry()
    job = JobContent(company="Acme", title="Engineer", start_date="2021-03", end_date="present")

    rendered = registry.render("job_header", job=job)
    assert rendered.startswith("<b>Acme</b>")
    assert rendered.endswith("Engineer")


@pytest.mark.unit
def test_date_range_present():
    """Test that an ongoing job prints as Present."""
    registry = TemplateRegistry()

    assert registry.render("date_range", start_date="2021-03", end_date="present") == "2021-03 - Present"
    assert registry.render("date_range", start_date="2018-07", end_date="2021-02") == "2018-07 - 2021-02"


@pytest.mark.unit
def test_missing_variable_raises_render_error():
    """Test that a missing template variable surfaces as TemplateRenderError."""
    registry = TemplateRegistry()

    with pytest.raises(TemplateRenderError) as exc_info:
        registry.render("paragraph")

    assert exc_info.value.template_name == "paragraph"
    assert exc_info.value.original_error is not None


@pytest.mark.unit
def test_template_variable_named_like_template():
    """Test that a template variable called `name` does not clash with the template name."""
    registry = TemplateRegistry()

    assert registry.render("name", name="Jane Doe") == "Jane Doe"


@pytest.mark.unit
def test_job_header_without_company():
    """Test that a job with only a title prints the title without a separator."""
    registry = TemplateRegistry()
    job = JobContent(company="", title="Backend Engineer", start_date="2020-07", end_date="2021-02")

    assert registry.render("job_header", job=job) == "Backend Engineer"
