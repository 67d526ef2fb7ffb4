"""Improvement rules evaluated against a computed score set."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable, Sequence

from outfit_score.recommender.scorer import ScoreSet


class Priority(IntEnum):
    """How urgently a suggestion should be acted upon."""

    HIGH = 1
    MEDIUM = 2
    LOW = 3


@dataclass(frozen=True, slots=True)
class Suggestion:
    """A single improvement tip for one score category."""

    category: str
    score: float
    priority: Priority
    suggestion: str
    tip: str | None = None

    def as_dict(self) -> dict[str, object]:
        return {
            "category": self.category,
            "score": self.score,
            "priority": int(self.priority),
            "suggestion": self.suggestion,
            "tip": self.tip,
        }


@dataclass(frozen=True, slots=True)
class ImprovementRule:
    """Threshold rule over one sub-score.

    ``priority_bands`` and ``text_bands`` are ``(upper_bound, value)`` pairs
    checked in order with a strict ``<``; the ``default_*`` value applies when
    no band matches.
    """

    category: str
    score_field: str
    threshold: float
    priority_bands: Sequence[tuple[float, Priority]]
    default_priority: Priority
    text_bands: Sequence[tuple[float, str]]
    default_text: str
    tip: str | None = None

    def is_satisfied(self, scores: ScoreSet) -> bool:
        """Return ``True`` when the sub-score is good enough to need no advice."""

        return self._score(scores) >= self.threshold

    def build_suggestion(self, scores: ScoreSet) -> Suggestion:
        score = self._score(scores)
        return Suggestion(
            category=self.category,
            score=score,
            priority=_pick(score, self.priority_bands, self.default_priority),
            suggestion=_pick(score, self.text_bands, self.default_text),
            tip=self.tip,
        )

    def _score(self, scores: ScoreSet) -> float:
        return getattr(scores, self.score_field)


def _pick(score: float, bands: Sequence[tuple[float, object]], default):
    for upper_bound, value in bands:
        if score < upper_bound:
            return value
    return default


DEFAULT_RULES: tuple[ImprovementRule, ...] = (
    ImprovementRule(
        category="Color harmony",
        score_field="color_harmony",
        threshold=11,
        priority_bands=((7, Priority.HIGH), (9, Priority.MEDIUM)),
        default_priority=Priority.LOW,
        text_bands=(
            (10, "Rethink the colour combination from scratch. Starting from plain, solid pieces is recommended."),
            (12.5, "The colours are clashing. Try bringing in neutrals such as black, white or grey."),
        ),
        default_text="Improve the colour harmony between top and bottom. Try complementary or analogous colours.",
        tip="Tip: complementary pairs such as red and teal or yellow and purple are visually striking.",
    ),
    ImprovementRule(
        category="Style consistency",
        score_field="style_consistency",
        threshold=11,
        priority_bands=((7, Priority.HIGH), (9, Priority.MEDIUM)),
        default_priority=Priority.LOW,
        text_bands=(
            (10, "The styles do not match at all. Commit to either casual or formal."),
            (12.5, "The styles are mixed. Settling on a single style is recommended."),
        ),
        default_text="Matching the top and bottom styles more closely will give a more unified look.",
    ),
    ImprovementRule(
        category="Pattern combination",
        score_field="pattern_combination",
        threshold=6,
        priority_bands=((4, Priority.HIGH), (5, Priority.MEDIUM)),
        default_priority=Priority.LOW,
        text_bands=(
            (6, "Rethink the pattern combination. Starting from plain, solid pieces is recommended."),
            (7.5, "The patterns are clashing. Keep a single pattern or swap one piece for a solid."),
        ),
        default_text="Improve the pattern combination. Pairing one solid piece with one patterned piece works best.",
    ),
    ImprovementRule(
        category="Proportion & silhouette",
        score_field="proportion_silhouette",
        threshold=6,
        priority_bands=((4, Priority.HIGH), (5, Priority.MEDIUM)),
        default_priority=Priority.LOW,
        text_bands=(
            (6, "The silhouette is unbalanced. Review the length and fit of each piece."),
            (7.5, "The proportions are off. Try adjusting the length of the top or the bottom."),
        ),
        default_text="Adjusting the length ratio between top and bottom will give a more balanced silhouette.",
    ),
    ImprovementRule(
        category="Texture harmony",
        score_field="texture_harmony",
        threshold=6,
        priority_bands=((4, Priority.HIGH),),
        default_priority=Priority.MEDIUM,
        text_bands=(
            (6, "The textures are clashing. Use similar textures or tone down the contrast."),
        ),
        default_text="Improve the texture combination. Try harmonious pairs such as cotton with denim or knit with cotton.",
    ),
    ImprovementRule(
        category="Context appropriateness",
        score_field="context_appropriateness",
        threshold=18,
        priority_bands=((12, Priority.HIGH), (15, Priority.MEDIUM)),
        default_priority=Priority.LOW,
        text_bands=(
            (12, "This style does not suit the chosen time, place and occasion. Switch to clothes that fit the situation."),
            (15, "The outfit only partly fits the chosen time, place and occasion. Adjust towards a more suitable style."),
        ),
        default_text="The outfit mostly fits the occasion; fine-tune the style for a better match.",
        tip="Tip: choose formal styles for business settings and relaxed styles for casual ones.",
    ),
)


class RulesEngine:
    """Evaluates a collection of improvement rules."""

    def __init__(self, rules: Iterable[ImprovementRule] = DEFAULT_RULES) -> None:
        self._rules = list(rules)

    def evaluate(self, scores: ScoreSet) -> list[Suggestion]:
        """Return suggestions for failed rules, most urgent first.

        The sort is stable, so equal priorities keep the rule order.
        """

        failed: list[Suggestion] = []
        for rule in self._rules:
            if not rule.is_satisfied(scores):
                failed.append(rule.build_suggestion(scores))
        return sorted(failed, key=lambda suggestion: suggestion.priority)


def generate_improvements(scores: ScoreSet) -> list[Suggestion]:
    """Build the prioritised improvement list for a score set."""

    return RulesEngine().evaluate(scores)
