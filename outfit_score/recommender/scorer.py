"""Outfit scoring utilities.

Seven sub-scores are computed from the extracted attributes, each bucketed on
fixed thresholds and normalised to its own maximum. The total is the plain sum
of the sub-scores.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from enum import Enum

from pydantic.alias_generators import to_camel

from outfit_score.catalog.attributes import AttributeSet, Pattern, Style, TPOContext
from outfit_score.imgproc.color import color_harmony_components

SUB_SCORE_MAXIMA: dict[str, float] = {
    "color_harmony": 18,
    "style_consistency": 18,
    "pattern_combination": 10,
    "proportion_silhouette": 10,
    "texture_harmony": 10,
    "context_appropriateness": 30,
    "overall_harmony": 4,
}

HARMONIOUS_TEXTURES = frozenset(
    {
        frozenset({"cotton", "denim"}),
        frozenset({"knit", "cotton"}),
        frozenset({"cotton"}),
    },
)

PROPORTION_PLACEHOLDER = 7.0
OVERALL_HARMONY_PLACEHOLDER = 3.0
PATTERN_SIZE_HARMONY = 4
TEXTURE_CONTRAST = 3
MISSING_TEXTURE_SCORE = 6.0
MISSING_TPO_SCORE = 20.0


class Grade(str, Enum):
    """Letter grade derived from the total score."""

    S = "S"
    A = "A"
    B = "B"
    C = "C"
    D = "D"
    F = "F"


_GRADE_THRESHOLDS = (
    (90, Grade.S),
    (80, Grade.A),
    (70, Grade.B),
    (60, Grade.C),
    (50, Grade.D),
)


@dataclass(frozen=True, slots=True)
class ScoreSet:
    """Rounded sub-scores, total and grade for one outfit."""

    color_harmony: float
    style_consistency: float
    pattern_combination: float
    proportion_silhouette: float
    texture_harmony: float
    context_appropriateness: float
    overall_harmony: float
    total_score: float
    grade: Grade

    def sub_scores(self) -> dict[str, float]:
        """Return the seven sub-scores keyed by field name."""

        return {name: getattr(self, name) for name in SUB_SCORE_MAXIMA}

    def as_dict(self) -> dict[str, object]:
        """Serialise with the camelCase keys used on the wire."""

        payload = {to_camel(name): value for name, value in asdict(self).items()}
        payload["grade"] = self.grade.value
        return payload


def round_score(value: float) -> float:
    """Round half up to two decimals, matching ``Math.round(x * 100) / 100``."""

    return math.floor(value * 100 + 0.5) / 100


def calculate_grade(total_score: float) -> Grade:
    """Map a total score onto the S..F scale; lower bounds are inclusive."""

    for threshold, grade in _GRADE_THRESHOLDS:
        if total_score >= threshold:
            return grade
    return Grade.F


def color_harmony_score(top_color: str, bottom_color: str) -> float:
    components = color_harmony_components(top_color, bottom_color)
    raw = components.harmony * 0.4 + components.contrast * 0.32 + components.tone_consistency * 0.28
    return raw / 10 * SUB_SCORE_MAXIMA["color_harmony"]


def style_consistency_score(top_style: Style, bottom_style: Style, has_season: bool) -> float:
    identical = top_style == bottom_style
    match_score = 7 if identical else 4
    unity_score = 6 if identical else 4
    season_score = 4 if has_season else 3

    raw = match_score * 0.4 + unity_score * 0.35 + season_score * 0.25
    return raw / 10 * SUB_SCORE_MAXIMA["style_consistency"]


def pattern_combination_score(top_pattern: Pattern, bottom_pattern: Pattern) -> float:
    top_solid = top_pattern == Pattern.SOLID
    bottom_solid = bottom_pattern == Pattern.SOLID
    if top_solid != bottom_solid:
        pattern_score = 9
    elif top_solid and bottom_solid:
        pattern_score = 7
    elif top_pattern == bottom_pattern:
        pattern_score = 5
    else:
        pattern_score = 3

    raw = pattern_score * 0.67 + PATTERN_SIZE_HARMONY * 0.33
    return raw / 10 * SUB_SCORE_MAXIMA["pattern_combination"]


def texture_harmony_score(top_texture: str | None, bottom_texture: str | None) -> float:
    if not top_texture or not bottom_texture:
        return MISSING_TEXTURE_SCORE

    combination_score = 5 if frozenset({top_texture, bottom_texture}) in HARMONIOUS_TEXTURES else 3
    raw = combination_score * 0.6 + TEXTURE_CONTRAST * 0.4
    return raw / 10 * SUB_SCORE_MAXIMA["texture_harmony"]


def _place_score(place: str, styles: tuple[Style, Style]) -> int:
    if place == "office" and Style.FORMAL in styles:
        return 9
    if place == "casual" and Style.CASUAL in styles:
        return 9
    if place == "party" and Style.SPORTY not in styles:
        return 8
    return 6


def _occasion_score(occasion: str, styles: tuple[Style, Style]) -> int:
    if occasion == "business" and Style.FORMAL in styles:
        return 9
    if occasion == "casual" and Style.CASUAL in styles:
        return 9
    if occasion == "date" and Style.SPORTY not in styles:
        return 8
    if occasion == "formal" and styles == (Style.FORMAL, Style.FORMAL):
        return 10
    return 6


def context_appropriateness_score(styles: tuple[Style, Style], tpo: TPOContext | None) -> float:
    if tpo is None:
        return MISSING_TPO_SCORE

    time_score = 8
    score = time_score + _place_score(tpo.place, styles) + _occasion_score(tpo.occasion, styles)
    return float(min(score, SUB_SCORE_MAXIMA["context_appropriateness"]))


def compute_scores(attributes: AttributeSet) -> ScoreSet:
    """Score an outfit. Never raises for malformed colours."""

    raw_scores = {
        "color_harmony": color_harmony_score(attributes.dominant_top, attributes.dominant_bottom),
        "style_consistency": style_consistency_score(
            attributes.top_style,
            attributes.bottom_style,
            attributes.season is not None,
        ),
        "pattern_combination": pattern_combination_score(attributes.top_pattern, attributes.bottom_pattern),
        "proportion_silhouette": PROPORTION_PLACEHOLDER,
        "texture_harmony": texture_harmony_score(attributes.top_texture, attributes.bottom_texture),
        "context_appropriateness": context_appropriateness_score(attributes.styles, attributes.tpo),
        "overall_harmony": OVERALL_HARMONY_PLACEHOLDER,
    }
    total = sum(raw_scores.values())

    return ScoreSet(
        **{name: round_score(value) for name, value in raw_scores.items()},
        total_score=round_score(total),
        grade=calculate_grade(total),
    )
