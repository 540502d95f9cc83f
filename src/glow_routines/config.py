import logging
import os
from dataclasses import dataclass

from .conflict_rules import DEFAULT_CONFLICT_RULES, ConflictRuleSet, load_rule_set
from .logging import LOG_FORMATS
from .products import DEFAULT_PAO_WARNING_DAYS


@dataclass(frozen=True)
class Config:
    log_format: str = "json"
    log_level: int = logging.INFO
    conflict_rules_path: str | None = None
    pao_warning_days: int = DEFAULT_PAO_WARNING_DAYS

    @classmethod
    def from_env(cls) -> "Config":
        log_format = os.environ.get("GLOW_LOG_FORMAT", "json").strip().lower()
        if log_format not in LOG_FORMATS:
            raise RuntimeError(f"GLOW_LOG_FORMAT must be one of {LOG_FORMATS}, got {log_format!r}")

        level_name = os.environ.get("GLOW_LOG_LEVEL", "INFO").strip().upper()
        level = logging.getLevelNamesMapping().get(level_name)
        if level is None:
            raise RuntimeError(f"GLOW_LOG_LEVEL must be a logging level name, got {level_name!r}")

        raw_warning_days = os.environ.get("GLOW_PAO_WARNING_DAYS", str(DEFAULT_PAO_WARNING_DAYS)).strip()
        try:
            pao_warning_days = int(raw_warning_days)
        except ValueError as exc:
            raise RuntimeError(
                f"GLOW_PAO_WARNING_DAYS must be a whole number of days, got {raw_warning_days!r}"
            ) from exc
        if pao_warning_days < 0:
            raise RuntimeError(f"GLOW_PAO_WARNING_DAYS must not be negative, got {pao_warning_days}")

        return cls(
            log_format=log_format,
            log_level=level,
            conflict_rules_path=os.environ.get("GLOW_CONFLICT_RULES_PATH") or None,
            pao_warning_days=pao_warning_days,
        )

    def conflict_rules(self) -> ConflictRuleSet:
        if self.conflict_rules_path is None:
            return DEFAULT_CONFLICT_RULES
        return load_rule_set(self.conflict_rules_path)
