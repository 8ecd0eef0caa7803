"""
Layout configuration loading.

Settings are declared as a structured dataclass and merged with a YAML file
through OmegaConf, so a partial override file only needs the keys it changes.

Examples:
    >>> settings = load_settings()
    >>> settings.strict_danger_zone
    100.0

    >>> settings = load_settings(Path("configs/dense.yaml"))
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from omegaconf import OmegaConf

load_dotenv()

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / "configs" / "layout.yaml"


@dataclass
class LayoutSettings:
    """
    Tunable constants shared by the layout solver, the rendering backend and the validator.

    All lengths are CSS pixels at 96 DPI.
    """

    page_height: float = 1042.5
    page_margin_px: float = 40.0
    side_margin_px: float = 50.0
    strict_danger_zone: float = 100.0
    relaxed_danger_zone: float = 60.0
    min_bullets: int = 3
    first_job_seed: int = 6
    other_job_seed: int = 4
    last_page_fill_warning: float = 0.15
    gap_threshold_months: int = 6
    fallback_floor_date: str = "2000-01"
    body_font: str = "Helvetica"
    bold_font: str = "Helvetica-Bold"
    cjk_font: Optional[str] = None


def resolve_config_path(config_path: Optional[Path] = None) -> Optional[Path]:
    """Explicit path, then QUIRE_LAYOUT_CONFIG, then the packaged default (None if missing)."""
    if config_path is not None:
        return Path(config_path)

    env_path = os.getenv("QUIRE_LAYOUT_CONFIG")
    if env_path:
        return Path(env_path)

    return DEFAULT_CONFIG_PATH if DEFAULT_CONFIG_PATH.exists() else None


def load_settings(config_path: Optional[Path] = None) -> LayoutSettings:
    """
    Load layout settings, merging a YAML override over the dataclass defaults.

    Args:
        config_path: Optional YAML file (defaults to QUIRE_LAYOUT_CONFIG or the packaged layout.yaml)

    Returns:
        LayoutSettings instance

    Raises:
        FileNotFoundError: If an explicitly requested config file does not exist
        omegaconf.errors.ValidationError: If a key has the wrong type
    """
    schema = OmegaConf.structured(LayoutSettings)

    path = resolve_config_path(config_path)
    if path is None:
        return OmegaConf.to_object(schema)

    if not path.exists():
        raise FileNotFoundError(f"Layout config not found: {path}")

    merged = OmegaConf.merge(schema, OmegaConf.load(path))
    return OmegaConf.to_object(merged)
