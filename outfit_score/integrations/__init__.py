"""Integration check helpers."""

from .checks import (
    IntegrationCheckResult,
    check_model_gateway,
    check_vision_models,
    run_all_checks,
)

__all__ = [
    "IntegrationCheckResult",
    "check_model_gateway",
    "check_vision_models",
    "run_all_checks",
]
