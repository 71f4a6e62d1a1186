from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from .dataset import AgeRange, GLOBAL_COUNTRY, normalize_sex


ProfileSex = Literal["male", "female", "other", "prefer-not-to-say"]

MIN_HEIGHT_CM = 100.0
MAX_HEIGHT_CM = 250.0


class UserProfile(BaseModel):
    """What the user tells us before a scan. Stature drives all cm scaling."""

    model_config = ConfigDict(frozen=True)

    age_range: AgeRange = "25-34"
    sex: ProfileSex = "prefer-not-to-say"
    height_cm: float = Field(ge=MIN_HEIGHT_CM, le=MAX_HEIGHT_CM)
    weight_kg: Optional[float] = Field(default=None, gt=0)
    country: str = GLOBAL_COUNTRY

    @property
    def reference_sex(self) -> str:
        return normalize_sex(self.sex)
