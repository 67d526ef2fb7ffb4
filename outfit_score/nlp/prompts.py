"""Prompt construction helpers for the stylist model."""

from __future__ import annotations

from typing import Sequence

from outfit_score.catalog.attributes import AttributeSet, Pattern, Season, Style
from outfit_score.recommender.rules_engine import Priority, Suggestion
from outfit_score.recommender.scorer import ScoreSet

_SCORE_LINES = (
    ("Color harmony", "color_harmony", 18),
    ("Style consistency", "style_consistency", 18),
    ("Pattern combination", "pattern_combination", 10),
    ("Proportion & silhouette", "proportion_silhouette", 10),
    ("Texture harmony", "texture_harmony", 10),
    ("Context appropriateness", "context_appropriateness", 30),
    ("Overall harmony", "overall_harmony", 4),
)


def _choices(enum_cls) -> str:
    return ", ".join(f'"{member.value}"' for member in enum_cls)


class PromptBuilder:
    """Builds the three prompts sent to the vision/text model."""

    def attributes(self) -> str:
        """Instruction that accompanies the outfit photo."""

        return (
            "This photo shows a person wearing a top and a bottom. Analyse the outfit and reply with JSON only.\n"
            "For the top and for the bottom give:\n"
            '- the 2-3 main colours as HEX codes, most prominent first (e.g. ["#FF0000", "#00FF00"])\n'
            f"- pattern: one of {_choices(Pattern)}\n"
            f"- style: one of {_choices(Style)}\n"
            '- texture (optional): e.g. "cotton", "denim", "knit", "silk", "leather"\n'
            f"Season (optional): one of {_choices(Season)} or null.\n"
            "Answer with exactly this JSON shape and no other text:\n"
            "{\n"
            '  "topColors": ["#HEX1", "#HEX2", "#HEX3"],\n'
            '  "bottomColors": ["#HEX1", "#HEX2"],\n'
            '  "topPattern": "solid",\n'
            '  "bottomPattern": "solid",\n'
            '  "topStyle": "casual",\n'
            '  "bottomStyle": "casual",\n'
            '  "topTexture": "cotton",\n'
            '  "bottomTexture": "denim",\n'
            '  "season": "spring"\n'
            "}"
        )

    def critique(self, scores: ScoreSet, attributes: AttributeSet) -> str:
        """Ask for a short, objective fashion-critic review."""

        score_lines = "\n".join(
            f"- {label}: {getattr(scores, field):.1f}/{maximum}" for label, field, maximum in _SCORE_LINES
        )
        return (
            "You are a professional fashion critic. Based on the evaluation below, write a professional, "
            "objective review of the outfit.\n\n"
            f"Scores:\n- Total: {scores.total_score:.1f}/100 (grade {scores.grade.value})\n{score_lines}\n\n"
            f"Outfit:\n{self._describe(attributes)}\n\n"
            "Requirements:\n"
            "1. Use the professional, objective tone of a fashion critic.\n"
            "2. Name concrete strengths and weaknesses.\n"
            "3. Suggest a direction for improvement.\n"
            "4. Two or three sentences.\n"
            "5. Plain text only, no quotes or Markdown."
        )

    def recommendations(
        self,
        scores: ScoreSet,
        attributes: AttributeSet,
        suggestions: Sequence[Suggestion],
    ) -> str:
        """Ask for 3-5 purchasable items that address the weakest categories."""

        weak_categories = [
            suggestion.category
            for suggestion in suggestions
            if suggestion.priority in (Priority.HIGH, Priority.MEDIUM)
        ]
        score_lines = "\n".join(
            f"- {label}: {getattr(scores, field)}/{maximum}"
            for label, field, maximum in _SCORE_LINES
            if field != "overall_harmony"
        )
        advice = "\n".join(f"- {item.category}: {item.suggestion}" for item in suggestions) or "- none"
        return (
            "You are a fashion stylist. Suggest items to buy that would improve this outfit.\n\n"
            f"Current outfit:\n{self._describe(attributes)}\n"
            f"- Categories that need work: {', '.join(weak_categories) or 'none'}\n\n"
            f"Scores:\n{score_lines}\n\n"
            f"Improvement advice:\n{advice}\n\n"
            "Reply with JSON only, in this shape:\n"
            "{\n"
            '  "products": [\n'
            "    {\n"
            '      "category": "top" | "bottom" | "accessory",\n'
            '      "name": "item name (e.g. white shirt, navy slacks)",\n'
            '      "description": "short description",\n'
            '      "color": "recommended colour (HEX or name)",\n'
            '      "style": "casual, formal, sporty, ...",\n'
            '      "reason": "why this item helps",\n'
            '      "estimatedPrice": "realistic price range in KRW, e.g. 30,000-50,000 KRW"\n'
            "    }\n"
            "  ],\n"
            '  "summary": "two or three sentence summary"\n'
            "}\n"
            "Recommend 3-5 specific, realistically purchasable items."
        )

    @staticmethod
    def _describe(attributes: AttributeSet) -> str:
        return "\n".join(
            (
                f"- Top colours: {', '.join(attributes.top_colors)}",
                f"- Bottom colours: {', '.join(attributes.bottom_colors)}",
                f"- Top pattern: {attributes.top_pattern.value}",
                f"- Bottom pattern: {attributes.bottom_pattern.value}",
                f"- Top style: {attributes.top_style.value}",
                f"- Bottom style: {attributes.bottom_style.value}",
                f"- Top texture: {attributes.top_texture or 'unknown'}",
                f"- Bottom texture: {attributes.bottom_texture or 'unknown'}",
            ),
        )
