"""Scoring engine and improvement rules."""

from .rules_engine import ImprovementRule, Priority, RulesEngine, Suggestion, generate_improvements
from .scorer import Grade, ScoreSet, calculate_grade, compute_scores

__all__ = [
    "Grade",
    "ImprovementRule",
    "Priority",
    "RulesEngine",
    "ScoreSet",
    "Suggestion",
    "calculate_grade",
    "compute_scores",
    "generate_improvements",
]
