from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Literal, Optional, Tuple

import yaml
from pydantic import BaseModel, Field, field_validator


logger = logging.getLogger(__name__)

DEFAULT_REFERENCE_PATH = Path(__file__).resolve().parent / "data" / "reference_sample.yaml"

Sex = Literal["male", "female", "other"]
AgeRange = Literal["18-24", "25-34", "35-44", "45-54", "55+"]

SEXES: Tuple[str, ...] = ("male", "female", "other")
AGE_RANGES: Tuple[str, ...] = ("18-24", "25-34", "35-44", "45-54", "55+")
GLOBAL_COUNTRY = "Global"
DEFAULT_FALLBACK_KEY = "Global|other|25-34"

# Derived ratio spreads are fixed rather than propagated from the lengths.
SHOULDER_TO_HIP_STDDEV = 0.05
LEG_TO_TORSO_STDDEV = 0.08


@dataclass(frozen=True)
class MetricStats:
    mean: float
    stddev: float


@dataclass(frozen=True)
class DemographicStats:
    shoulder_width_cm: MetricStats
    hip_width_cm: MetricStats
    leg_length_cm: MetricStats
    torso_length_cm: MetricStats
    arm_length_cm: MetricStats
    wingspan_cm: MetricStats
    shoulder_to_hip_ratio: MetricStats
    leg_to_torso_ratio: MetricStats


@dataclass(frozen=True)
class FaceStats:
    interocular_ratio: MetricStats
    facial_width_ratio: MetricStats


Pair = Tuple[float, float]


class _BodyEntry(BaseModel):
    shoulder: Pair
    hip: Pair
    leg: Pair
    torso: Pair
    arm: Pair

    @field_validator("shoulder", "hip", "leg", "torso", "arm")
    @classmethod
    def _positive(cls, v: Pair) -> Pair:
        if v[0] <= 0 or v[1] <= 0:
            raise ValueError("mean and stddev must be positive")
        return v


class _FaceEntry(BaseModel):
    interocular_ratio: Pair
    facial_width_ratio: Pair


class _ReferenceFile(BaseModel):
    schema_version: int = Field(default=1, alias="schema")
    fallback_key: str = DEFAULT_FALLBACK_KEY
    body: Dict[str, _BodyEntry]
    face: Dict[str, _FaceEntry] = Field(default_factory=dict)
    chest: Dict[str, Dict[str, Pair]] = Field(default_factory=dict)
    waist: Dict[str, Dict[str, Pair]] = Field(default_factory=dict)


def _stats(pair: Pair) -> MetricStats:
    return MetricStats(mean=float(pair[0]), stddev=float(pair[1]))


def _demographic(entry: _BodyEntry) -> DemographicStats:
    sm, ss = entry.shoulder
    hm, _ = entry.hip
    lm, _ = entry.leg
    tm, _ = entry.torso
    am, as_ = entry.arm
    # Wingspan ~ two arms plus the shoulder span.
    wingspan = MetricStats(mean=am * 2.0 + sm, stddev=math.sqrt(ss ** 2 + 2.0 * as_ ** 2))
    return DemographicStats(
        shoulder_width_cm=_stats(entry.shoulder),
        hip_width_cm=_stats(entry.hip),
        leg_length_cm=_stats(entry.leg),
        torso_length_cm=_stats(entry.torso),
        arm_length_cm=_stats(entry.arm),
        wingspan_cm=wingspan,
        shoulder_to_hip_ratio=MetricStats(mean=sm / hm, stddev=SHOULDER_TO_HIP_STDDEV),
        leg_to_torso_ratio=MetricStats(mean=lm / tm, stddev=LEG_TO_TORSO_STDDEV),
    )


def normalize_sex(sex: Optional[str]) -> str:
    """Map profile sex values (incl. 'prefer-not-to-say') onto table sexes."""
    s = str(sex or "").strip().lower()
    return s if s in SEXES else "other"


def dataset_key(country: str, sex: str, age_range: str) -> str:
    return f"{country}|{sex}|{age_range}"


class ReferenceTable:
    """Reference statistics indexed by country, sex and age band.

    Lookups never fail: a missing demographic falls back to the Global bucket
    for the same sex and age band, then to a fixed default bucket.
    """

    def __init__(
        self,
        body: Dict[str, DemographicStats],
        face: Optional[Dict[str, FaceStats]] = None,
        chest: Optional[Dict[str, Dict[str, MetricStats]]] = None,
        waist: Optional[Dict[str, Dict[str, MetricStats]]] = None,
        fallback_key: str = DEFAULT_FALLBACK_KEY,
    ) -> None:
        if fallback_key not in body:
            raise ValueError(f"Fallback bucket '{fallback_key}' missing from reference table")
        self.body = body
        self.face = face or {}
        self.chest = chest or {}
        self.waist = waist or {}
        self.fallback_key = fallback_key

    @property
    def countries(self) -> Tuple[str, ...]:
        seen: Dict[str, None] = {}
        for key in self.body:
            seen.setdefault(key.split("|", 1)[0], None)
        return tuple(seen)

    def get_stats(self, country: str, sex: str, age_range: str) -> DemographicStats:
        sex = normalize_sex(sex)
        key = dataset_key(country, sex, age_range)
        if key in self.body:
            return self.body[key]
        global_key = dataset_key(GLOBAL_COUNTRY, sex, age_range)
        if global_key in self.body:
            logger.info("No reference stats for %s; using %s", key, global_key)
            return self.body[global_key]
        logger.info("No reference stats for %s; using %s", key, self.fallback_key)
        return self.body[self.fallback_key]

    def get_face_stats(self, sex: str) -> Optional[FaceStats]:
        return self.face.get(normalize_sex(sex)) or self.face.get("other")

    def _circumference(self, table: Dict[str, Dict[str, MetricStats]], sex: str, country: str) -> Optional[MetricStats]:
        by_sex = table.get(normalize_sex(sex)) or table.get("other")
        if not by_sex:
            return None
        return by_sex.get(country) or by_sex.get(GLOBAL_COUNTRY)

    def get_chest_stats(self, sex: str, country: str = GLOBAL_COUNTRY) -> Optional[MetricStats]:
        return self._circumference(self.chest, sex, country)

    def get_waist_stats(self, sex: str, country: str = GLOBAL_COUNTRY) -> Optional[MetricStats]:
        return self._circumference(self.waist, sex, country)


def load_reference_table(path: Optional[Path] = None) -> ReferenceTable:
    ref_path = Path(path) if path is not None else DEFAULT_REFERENCE_PATH
    data = yaml.safe_load(ref_path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"Reference table must be a mapping: {ref_path}")
    parsed = _ReferenceFile.model_validate(data)
    return ReferenceTable(
        body={key: _demographic(entry) for key, entry in parsed.body.items()},
        face={
            sex: FaceStats(
                interocular_ratio=_stats(entry.interocular_ratio),
                facial_width_ratio=_stats(entry.facial_width_ratio),
            )
            for sex, entry in parsed.face.items()
        },
        chest={sex: {c: _stats(p) for c, p in rows.items()} for sex, rows in parsed.chest.items()},
        waist={sex: {c: _stats(p) for c, p in rows.items()} for sex, rows in parsed.waist.items()},
        fallback_key=parsed.fallback_key,
    )


_DEFAULT_TABLE: Optional[ReferenceTable] = None


def default_reference_table() -> ReferenceTable:
    """The bundled synthetic sample table, loaded once."""
    global _DEFAULT_TABLE
    if _DEFAULT_TABLE is None:
        _DEFAULT_TABLE = load_reference_table()
    return _DEFAULT_TABLE
