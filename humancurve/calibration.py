from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


DEFAULT_CALIBRATION_PATH = Path(__file__).resolve().parent / "data" / "calibration.yaml"


class Calibration(BaseModel):
    """Empirical tuning constants for extraction, scaling and capture.

    None of these are derived; they reproduce the behaviour of the capture
    flow they were tuned on. Override them from YAML rather than in code.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    # Head top sits this many ear-to-nose distances above the nose.
    head_top_factor: float = Field(default=1.3, gt=0)
    # Ear-midpoint to mouth-midpoint times this approximates forehead-to-chin.
    face_height_factor: float = Field(default=1.4, gt=0)
    # Head-to-hip as a fraction of stature, for upper-body scaling.
    upper_body_height_fraction: float = Field(default=0.56, gt=0, le=1)
    # Chest width is narrower than shoulder width.
    chest_width_factor: float = Field(default=0.85, gt=0)
    # Waist width is narrower than hip width.
    waist_width_factor: float = Field(default=0.88, gt=0)

    visibility_threshold: float = Field(default=0.5, ge=0, le=1)
    good_frame_reward: int = Field(default=1, ge=1)
    bad_frame_penalty: int = Field(default=2, ge=1)
    countdown_units: int = Field(default=3, ge=1)
    buffer_capacity: int = Field(default=60, ge=1)


def _read_yaml(path: Path) -> Dict[str, Any]:
    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Calibration file must contain a mapping: {path}")
    return data


def load_calibration(path: Optional[Path] = None) -> Calibration:
    """Load calibration constants; a missing file yields the built-in defaults."""
    cfg_path = Path(path) if path is not None else DEFAULT_CALIBRATION_PATH
    if not cfg_path.exists():
        return Calibration()
    data = _read_yaml(cfg_path)
    return Calibration.model_validate(data.get("calibration", data))


DEFAULT_CALIBRATION = Calibration()
