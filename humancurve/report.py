from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from .badges import Badge, compute_badges
from .dataset import GLOBAL_COUNTRY, MetricStats, ReferenceTable, default_reference_table
from .modes import ScanMode
from .scaling import ScaledMeasurement
from .stats import compute_percentile, ordinal_suffix


@dataclass(frozen=True)
class MetricComparison:
    key: str
    label: str
    unit: str
    value: float
    mean: float
    stddev: float
    percentile: int

    @property
    def ordinal(self) -> str:
        return ordinal_suffix(self.percentile)


@dataclass
class ScanReport:
    scan_mode: ScanMode
    country: str
    sex: str
    age_range: str
    metrics: List[MetricComparison] = field(default_factory=list)
    badges: List[Badge] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "scan_mode": self.scan_mode.value,
            "country": self.country,
            "sex": self.sex,
            "age_range": self.age_range,
            "metrics": [dict(asdict(m), ordinal=m.ordinal) for m in self.metrics],
            "badges": [asdict(b) for b in self.badges],
        }


def _compare(key: str, label: str, unit: str, value: Optional[float], stats: Optional[MetricStats]) -> Optional[MetricComparison]:
    # Unmeasured (None) and neutral (0) values are left out of the comparison.
    if value is None or value <= 0 or stats is None:
        return None
    return MetricComparison(
        key=key,
        label=label,
        unit=unit,
        value=float(value),
        mean=stats.mean,
        stddev=stats.stddev,
        percentile=compute_percentile(value, stats.mean, stats.stddev),
    )


def build_report(
    measurement: ScaledMeasurement,
    sex: str,
    age_range: str,
    country: str = GLOBAL_COUNTRY,
    table: Optional[ReferenceTable] = None,
) -> ScanReport:
    """Percentile rows for every metric the scan actually measured."""
    table = table or default_reference_table()
    mode = measurement.scan_mode or ScanMode.FULL_BODY
    report = ScanReport(scan_mode=mode, country=country, sex=sex, age_range=age_range)
    m = measurement

    rows: List[Optional[MetricComparison]] = []
    if mode is ScanMode.FACE:
        face_stats = table.get_face_stats(sex)
        if m.face is not None and face_stats is not None:
            rows.append(_compare("interocular_ratio", "Eye Spacing Ratio", "", m.face.interocular_ratio, face_stats.interocular_ratio))
            rows.append(_compare("facial_width_ratio", "Facial Width Ratio", "", m.face.facial_width_ratio, face_stats.facial_width_ratio))
    elif mode is ScanMode.CHEST:
        rows.append(_compare("chest_circumference_cm", "Chest Circumference", "cm", m.chest_circumference_cm, table.get_chest_stats(sex, country)))
    elif mode is ScanMode.WAIST:
        rows.append(_compare("waist_circumference_cm", "Waist Circumference", "cm", m.waist_circumference_cm, table.get_waist_stats(sex, country)))
    else:
        st = table.get_stats(country, sex, age_range)
        upper = mode is ScanMode.UPPER_BODY
        rows.append(_compare("shoulder_width_cm", "Shoulder Width", "cm", m.shoulder_width_cm, st.shoulder_width_cm))
        rows.append(_compare("hip_width_cm", "Hip Width", "cm", m.hip_width_cm, st.hip_width_cm))
        rows.append(_compare("leg_length_cm", "Leg Length", "cm", m.leg_length_cm, st.leg_length_cm))
        rows.append(_compare("torso_length_cm", "Torso Length", "cm", m.torso_length_cm, st.torso_length_cm))
        rows.append(_compare("arm_length_cm", "Arm Length", "cm", m.arm_length_cm, st.arm_length_cm))
        # Upper-body framing crops the outstretched span, so wingspan is not compared.
        if not upper:
            rows.append(_compare("wingspan_cm", "Wingspan", "cm", m.wingspan_cm, st.wingspan_cm))
        rows.append(_compare("shoulder_to_hip_ratio", "Shoulder / Hip Ratio", "", m.shoulder_to_hip_ratio, st.shoulder_to_hip_ratio))
        rows.append(_compare("leg_to_torso_ratio", "Leg / Torso Ratio", "", m.leg_to_torso_ratio, st.leg_to_torso_ratio))
        report.badges = compute_badges(m)

    report.metrics = [r for r in rows if r is not None]
    return report
