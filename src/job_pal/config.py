"""Application configuration loaded from config.yaml."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml


@dataclass(frozen=True)
class LLMConfig:
    model: str = "claude-sonnet-4-5-20250929"
    max_tokens: int = 4096
    interview_max_tokens: int = 2048
    timeout: int = 120

    def __post_init__(self) -> None:
        if not 1 <= self.timeout <= 600:
            raise ValueError(f"timeout must be between 1 and 600, got {self.timeout}")
        if self.max_tokens < 1 or self.interview_max_tokens < 1:
            raise ValueError("max_tokens and interview_max_tokens must be positive")


@dataclass(frozen=True)
class StorageConfig:
    data_dir: str = "~/.job-pal/data"

    @property
    def resolved_data_dir(self) -> Path:
        return Path(self.data_dir).expanduser()


@dataclass(frozen=True)
class InterviewConfig:
    target_min_questions: int = 5
    target_max_questions: int = 7

    def __post_init__(self) -> None:
        if not 1 <= self.target_min_questions <= self.target_max_questions:
            raise ValueError(
                "target_min_questions must be >= 1 and <= target_max_questions, "
                f"got {self.target_min_questions}..{self.target_max_questions}"
            )


@dataclass(frozen=True)
class AppConfig:
    llm: LLMConfig = field(default_factory=LLMConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    interview: InterviewConfig = field(default_factory=InterviewConfig)


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load config from YAML file, falling back to defaults."""
    if path is None:
        candidates = [
            Path.cwd() / "config.yaml",
            Path(__file__).resolve().parent.parent.parent / "config.yaml",
        ]
        for c in candidates:
            if c.exists():
                path = c
                break

    raw: dict = {}
    if path is not None:
        p = Path(path)
        if p.exists():
            raw = yaml.safe_load(p.read_text()) or {}

    return AppConfig(
        llm=LLMConfig(**raw.get("llm", {})),
        storage=StorageConfig(**raw.get("storage", {})),
        interview=InterviewConfig(**raw.get("interview", {})),
    )
