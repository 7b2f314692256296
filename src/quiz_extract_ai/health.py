"""
Readiness check.

Validates configuration once at start-up and reports the result as data.
API keys are never included in the report, only whether one is set.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from quiz_extract_ai.config import Settings
from quiz_extract_ai.ocr import resolve_tessdata_dir, tesseract_version

GENERATION_CHECK = "generation"


@dataclass(frozen=True)
class CheckResult:
    """Outcome of one readiness check."""

    name: str
    ok: bool
    detail: str = ""


@dataclass(frozen=True)
class ReadinessReport:
    """All readiness checks. Only the generation check decides readiness."""

    checks: list[CheckResult] = field(default_factory=list)

    @property
    def ready(self) -> bool:
        return any(check.name == GENERATION_CHECK and check.ok for check in self.checks)

    def get(self, name: str) -> CheckResult | None:
        for check in self.checks:
            if check.name == name:
                return check
        return None


def _generation_check(settings: Settings) -> CheckResult:
    config = settings.generation
    if not config.api_key:
        return CheckResult(
            GENERATION_CHECK,
            ok=False,
            detail=f"{config.provider.value} API key missing",
        )
    return CheckResult(
        GENERATION_CHECK,
        ok=True,
        detail=f"{config.provider.value} API key configured (model: {config.model})",
    )


def _fallback_check(settings: Settings) -> CheckResult:
    config = settings.generation
    provider = config.fallback_provider.value if config.fallback_provider else ""
    if config.fallback_api_key:
        return CheckResult("generation_fallback", ok=True, detail=f"{provider} API key configured")
    return CheckResult("generation_fallback", ok=False, detail=f"{provider} API key missing")


def check_readiness(settings: Settings) -> ReadinessReport:
    """
    Run every readiness check against the given settings.

    OCR checks are informational: OCR is optional and its absence only
    means image content yields no text.
    """
    checks = [_generation_check(settings)]

    if settings.generation.fallback_provider:
        checks.append(_fallback_check(settings))

    if not settings.ocr.enabled:
        checks.append(CheckResult("tesseract", ok=False, detail="OCR disabled in configuration"))
        return ReadinessReport(checks=checks)

    version = tesseract_version(settings.ocr.tesseract_cmd)
    if version:
        checks.append(CheckResult("tesseract", ok=True, detail=f"version {version}"))
    else:
        checks.append(CheckResult("tesseract", ok=False, detail="tesseract binary not found"))

    tessdata = resolve_tessdata_dir(settings.ocr.tessdata_dir, settings.ocr.tessdata_candidates)
    if tessdata:
        checks.append(CheckResult("tessdata", ok=True, detail=str(tessdata)))
    else:
        checks.append(
            CheckResult("tessdata", ok=False, detail="no tessdata directory found, engine defaults apply")
        )

    return ReadinessReport(checks=checks)
