"""Connectivity checks for the hosted stylist model."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable

from outfit_score.config.settings import get_settings
from outfit_score.nlp.stylist_client import StylistModelClient


@dataclass(slots=True)
class IntegrationCheckResult:
    """Structured result describing the integration check outcome."""

    name: str
    success: bool
    message: str


async def _run_check(
    name: str,
    factory: Callable[[], Awaitable[bool]],
    success_message: str,
    failure_message: str = "Service responded with non-success status.",
) -> IntegrationCheckResult:
    try:
        result = await factory()
    except Exception as exc:
        return IntegrationCheckResult(name=name, success=False, message=str(exc))

    if result:
        return IntegrationCheckResult(name=name, success=True, message=success_message)
    return IntegrationCheckResult(name=name, success=False, message=failure_message)


async def check_model_gateway() -> IntegrationCheckResult:
    """Ping the AITunnel proxy and return the result."""

    client = StylistModelClient(get_settings())

    async def _ping() -> bool:
        try:
            return await client.ping()
        finally:
            await client.close()

    return await _run_check(
        name="AITunnel",
        factory=_ping,
        success_message="AITunnel API is reachable.",
    )


async def check_vision_models() -> IntegrationCheckResult:
    """Verify that at least one configured vision model is exposed by the proxy."""

    settings = get_settings()
    client = StylistModelClient(settings)

    async def _available() -> bool:
        try:
            listed = set(await client.list_models())
        finally:
            await client.close()
        return any(model in listed for model in settings.vision_models)

    return await _run_check(
        name="Vision models",
        factory=_available,
        success_message=f"Vision models available: {', '.join(settings.vision_models)}.",
        failure_message="None of the configured vision models is listed by the proxy.",
    )


async def run_all_checks() -> list[IntegrationCheckResult]:
    """Execute all integration checks concurrently."""

    return list(await asyncio.gather(check_model_gateway(), check_vision_models()))
