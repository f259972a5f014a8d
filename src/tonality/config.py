"""Configuration models, resolution and validation for tonality."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
import json
import os
from pathlib import Path
from typing import Any

from tonality.embeddings import EMBEDDING_MODES

DEFAULT_CONFIG_PATH = Path("tonality.config.json")
DEFAULT_MODELS = {
    "mock": "mock-embedding",
    "openai": "text-embedding-3-large",
    "openrouter": "openai/text-embedding-3-large",
}
API_KEY_ENV = {
    "openai": "OPENAI_API_KEY",
    "openrouter": "OPENROUTER_API_KEY",
}


@dataclass(frozen=True)
class EmbeddingsConfig:
    mode: str = "mock"
    model: str | None = None
    base_url: str | None = None
    timeout_s: float = 60.0

    @property
    def resolved_model(self) -> str:
        return self.model or DEFAULT_MODELS.get(self.mode, DEFAULT_MODELS["mock"])

    def to_dict(self) -> dict:
        return {
            "mode": self.mode,
            "model": self.resolved_model,
            "base_url": self.base_url,
            "timeout_s": self.timeout_s,
        }


@dataclass(frozen=True)
class TonalityConfig:
    embeddings: EmbeddingsConfig = field(default_factory=EmbeddingsConfig)
    anchors_path: str | None = None
    notes: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "embeddings": self.embeddings.to_dict(),
            "anchors_path": self.anchors_path,
            "notes": list(self.notes),
        }


@dataclass(frozen=True)
class ValidationIssue:
    path: str
    message: str


@dataclass(frozen=True)
class ValidationResult:
    config: dict[str, Any] | None
    errors: list[ValidationIssue]
    warnings: list[ValidationIssue]


def load_and_validate_config(path: Path) -> ValidationResult:
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return ValidationResult(
            config=None,
            errors=[ValidationIssue("config", f"Config not found: {path}")],
            warnings=[],
        )
    except (OSError, json.JSONDecodeError) as exc:
        return ValidationResult(
            config=None,
            errors=[ValidationIssue("config", f"Invalid JSON: {exc}")],
            warnings=[],
        )
    if not isinstance(raw, dict):
        return ValidationResult(
            config=None,
            errors=[ValidationIssue("config", "Config must be a JSON object.")],
            warnings=[],
        )
    return validate_config(raw)


def validate_config(data: dict[str, Any]) -> ValidationResult:
    errors: list[ValidationIssue] = []
    warnings: list[ValidationIssue] = []

    unknown = sorted(set(data) - {"embeddings", "anchors_path"})
    for key in unknown:
        warnings.append(ValidationIssue(key, "Unknown key; ignored."))

    embeddings = data.get("embeddings")
    if embeddings is None:
        warnings.append(ValidationIssue("embeddings", "Missing embeddings block; defaults apply."))
    elif not isinstance(embeddings, dict):
        errors.append(ValidationIssue("embeddings", "embeddings must be an object."))
    else:
        mode = embeddings.get("mode", "mock")
        if mode not in EMBEDDING_MODES:
            expected = ", ".join(EMBEDDING_MODES)
            errors.append(
                ValidationIssue("embeddings.mode", f"Unsupported mode '{mode}'. Expected one of {expected}.")
            )
        elif mode in API_KEY_ENV and not os.getenv(API_KEY_ENV[mode]):
            warnings.append(
                ValidationIssue("embeddings.mode", f"{API_KEY_ENV[mode]} not set; mock embeddings will be used.")
            )
        for key in ("model", "base_url"):
            value = embeddings.get(key)
            if value is not None and (not isinstance(value, str) or not value.strip()):
                errors.append(ValidationIssue(f"embeddings.{key}", f"{key} must be a non-empty string."))
        timeout = embeddings.get("timeout_s")
        if timeout is not None:
            if isinstance(timeout, bool) or not isinstance(timeout, (int, float)):
                errors.append(ValidationIssue("embeddings.timeout_s", "timeout_s must be a number."))
            elif timeout <= 0:
                errors.append(ValidationIssue("embeddings.timeout_s", "timeout_s must be positive."))

    anchors_path = data.get("anchors_path")
    if anchors_path is not None:
        if not isinstance(anchors_path, str) or not anchors_path.strip():
            errors.append(ValidationIssue("anchors_path", "anchors_path must be a non-empty string."))
        elif not Path(anchors_path).exists():
            warnings.append(ValidationIssue("anchors_path", f"Anchor file not found: {anchors_path}"))

    return ValidationResult(config=data if not errors else None, errors=errors, warnings=warnings)


def resolve_config(
    *,
    path: Path | None = None,
    mode: str | None = None,
    model: str | None = None,
    base_url: str | None = None,
    anchors_path: str | None = None,
) -> TonalityConfig:
    """Merge defaults, config file, environment and explicit overrides, in that order.

    Raises ``ValueError`` when the config file exists but is invalid.
    """
    config = TonalityConfig()
    config_path = path or DEFAULT_CONFIG_PATH
    if config_path.exists():
        result = load_and_validate_config(config_path)
        if result.errors or result.config is None:
            issues = "; ".join(f"{issue.path}: {issue.message}" for issue in result.errors)
            raise ValueError(f"Invalid config {config_path}: {issues}")
        config = _apply_mapping(config, result.config)
    elif path is not None:
        raise ValueError(f"Config not found: {path}")

    embeddings = replace(
        config.embeddings,
        mode=mode or os.getenv("TONALITY_EMBEDDINGS_MODE") or config.embeddings.mode,
        model=model or os.getenv("TONALITY_EMBEDDINGS_MODEL") or config.embeddings.model,
        base_url=base_url or os.getenv("TONALITY_EMBEDDINGS_BASE_URL") or config.embeddings.base_url,
    )
    if embeddings.mode not in EMBEDDING_MODES:
        raise ValueError(f"Unsupported embeddings mode: {embeddings.mode}")

    notes = list(config.notes)
    key_env = API_KEY_ENV.get(embeddings.mode)
    if key_env and not os.getenv(key_env):
        notes.append(f"{key_env} missing; embeddings mode set to mock.")
        embeddings = replace(embeddings, mode="mock", model=None, base_url=None)

    return TonalityConfig(
        embeddings=embeddings,
        anchors_path=anchors_path or config.anchors_path,
        notes=tuple(notes),
    )


def _apply_mapping(config: TonalityConfig, data: dict[str, Any]) -> TonalityConfig:
    block = data.get("embeddings") or {}
    embeddings = EmbeddingsConfig(
        mode=str(block.get("mode", config.embeddings.mode)),
        model=block.get("model", config.embeddings.model),
        base_url=block.get("base_url", config.embeddings.base_url),
        timeout_s=float(block.get("timeout_s", config.embeddings.timeout_s)),
    )
    return TonalityConfig(
        embeddings=embeddings,
        anchors_path=data.get("anchors_path", config.anchors_path),
        notes=config.notes,
    )
