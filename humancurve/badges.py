from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List

from .scaling import ScaledMeasurement


# Ratio cut-offs for the proportion badges. Wording stays neutral.
BADGE_THRESHOLDS: Dict[str, float] = {
    "broad_shoulder_min": 1.35,
    "athletic_min": 1.10,
    "wide_hip_max": 0.88,
    "long_leg_min": 1.70,
    "long_torso_max": 1.25,
    "long_reach_min": 1.05,
    "compact_max": 0.95,
    "sprinter_leg_min": 1.60,
    "sprinter_reach_min": 1.02,
}


@dataclass(frozen=True)
class Badge:
    badge_id: str
    label: str
    description: str


def compute_badges(m: ScaledMeasurement) -> List[Badge]:
    """Proportion badges from the ratios. A ratio of 0 means unmeasured and earns nothing."""
    t = BADGE_THRESHOLDS
    badges: List[Badge] = []

    shr = m.shoulder_to_hip_ratio
    if shr > 0:
        if shr >= t["broad_shoulder_min"]:
            badges.append(Badge("broad-shouldered", "Broad-Shouldered", "Your shoulders are notably wider relative to your hips."))
        elif shr <= t["wide_hip_max"]:
            badges.append(Badge("wide-hipped", "Wide-Hipped", "Your hips are notably wider relative to your shoulders."))
        elif shr >= t["athletic_min"]:
            badges.append(Badge("athletic-frame", "Athletic Frame", "You have a classic V-taper proportion."))
        else:
            badges.append(Badge("balanced-frame", "Balanced Frame", "Your shoulders and hips are well-proportioned."))

    ltr = m.leg_to_torso_ratio
    if ltr > 0:
        if ltr >= t["long_leg_min"]:
            badges.append(Badge("long-legged", "Long-Legged", "Your legs are long relative to your torso."))
        elif ltr <= t["long_torso_max"]:
            badges.append(Badge("long-torso", "Long-Torso", "You have a longer torso relative to your legs."))
        else:
            badges.append(Badge("proportional-body", "Proportional Build", "Your legs and torso are proportionally balanced."))

    ahr = m.armspan_to_height_ratio
    if ahr > 0:
        if ahr >= t["long_reach_min"]:
            badges.append(Badge("long-reach", "Long Reach", "Your wingspan exceeds your height."))
        elif ahr <= t["compact_max"]:
            badges.append(Badge("compact-limbs", "Compact Build", "Your armspan is shorter than your height."))

    if ltr >= t["sprinter_leg_min"] and ahr >= t["sprinter_reach_min"]:
        badges.append(
            Badge("sprinter-build", "Sprinter Build", "Long limbs relative to torso, a build associated with speed and reach.")
        )

    return badges
