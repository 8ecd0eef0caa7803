"""Layout strategy selection: page budget and skill-grid shape from the job count."""

from dataclasses import dataclass


@dataclass(frozen=True)
class LayoutStrategy:
    """
    Fixed layout decisions for one document.

    Attributes:
        target_pages: Page count the allocator must fit into
        skill_columns: Columns in the skills grid (1, 2 or 3)
        skill_categories: Number of skill categories shown
        skill_items_per_cat: Skills listed per category
    """

    target_pages: int
    skill_columns: int
    skill_categories: int
    skill_items_per_cat: int

    def __str__(self) -> str:
        return (
            f"{self.target_pages} pages, {self.skill_columns} skill column(s), "
            f"{self.skill_categories}x{self.skill_items_per_cat} skills"
        )


def select_layout_strategy(job_count: int, has_certificates: bool) -> LayoutStrategy:
    """
    Pick the layout for a document with `job_count` jobs.

    Every three jobs add a page. Within a page budget the skills grid widens
    (1, 2, then 3 columns) so that the extra job's content has room. A
    certificates section takes space from the skills grid.

    Never raises: a job count below 1 is treated as 1.

    Examples:
        >>> select_layout_strategy(1, False)
        LayoutStrategy(target_pages=2, skill_columns=1, skill_categories=4, skill_items_per_cat=4)
        >>> select_layout_strategy(4, False).target_pages
        3
        >>> select_layout_strategy(3, True)
        LayoutStrategy(target_pages=2, skill_columns=3, skill_categories=3, skill_items_per_cat=3)
    """
    job_count = max(1, int(job_count))
    target_pages = 2 + (job_count - 1) // 3
    style = (job_count - 1) % 3

    if style == 0:
        return LayoutStrategy(target_pages, 1, 4, 3 if has_certificates else 4)
    if style == 1:
        return LayoutStrategy(target_pages, 2, 4, 3 if has_certificates else 4)
    return LayoutStrategy(target_pages, 3, 3, 3 if has_certificates else 4)
