"""Analysis settings loaded from ``configs/analysis.yml``."""
from __future__ import annotations

import os
from dataclasses import dataclass, fields
from datetime import date
from pathlib import Path
from typing import Any, Dict

import pandas as pd
import yaml

from utils.io import get_paths, logger

CONFIG_ENV_VAR = "RETAIL_ANALYSIS_CONFIG"


@dataclass(frozen=True)
class AnalysisSettings:
    raw_file: str = "retail_sales.csv"
    as_of: date | None = None
    age_min: int = 18
    age_max: int = 100
    top_n_customers: int = 5
    high_value_threshold: float = 1000.0

    def reference_date(self) -> pd.Timestamp:
        """Day against which 'future' sale dates are judged."""
        if self.as_of is None:
            return pd.Timestamp.today().normalize()
        return pd.Timestamp(self.as_of).normalize()


def _config_path() -> Path:
    override = os.getenv(CONFIG_ENV_VAR)
    if override:
        return Path(override)
    return get_paths().configs / "analysis.yml"


def _parse(raw: Dict[str, Any]) -> AnalysisSettings:
    known = {f.name for f in fields(AnalysisSettings)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ValueError(f"Unknown analysis settings: {unknown}")
    values = dict(raw)
    if values.get("as_of") is not None:
        values["as_of"] = pd.Timestamp(values["as_of"]).date()
    settings = AnalysisSettings(**values)
    if settings.age_min > settings.age_max:
        raise ValueError(
            f"age_min ({settings.age_min}) must not exceed age_max ({settings.age_max})"
        )
    if settings.top_n_customers < 1:
        raise ValueError("top_n_customers must be >= 1")
    return settings


def load_settings(path: str | Path | None = None) -> AnalysisSettings:
    """Load analysis settings; a missing file yields the defaults."""
    config_path = Path(path) if path else _config_path()
    if not config_path.exists():
        logger.warning("Analysis config %s not found; using defaults", config_path)
        return AnalysisSettings()
    with config_path.open("r", encoding="utf-8") as fh:
        raw = yaml.safe_load(fh) or {}
    return _parse(raw.get("analysis", {}) or {})


__all__ = ["AnalysisSettings", "load_settings", "CONFIG_ENV_VAR"]
