"""
Engine settings.

Only the options that change engine output live here: negation display,
truth-value rendering, row enumeration order, and whether intermediate
subexpression columns are produced. Settings can be loaded from a YAML file
laid out like the application settings::

    logic:
      negation_handling: preserve   # preserve | normalize | simplify
      truth_values: "0/1"           # 0/1 | F/T
      row_order: "0→1"              # 0→1 | 1→0 (ASCII 0->1 / 1->0 accepted)
    table:
      show_sub_expressions: true
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from logicflow.errors import ConfigError

logger = logging.getLogger(__name__)

SETTINGS_ENV_VAR = "LOGICFLOW_SETTINGS"
DEFAULT_SETTINGS_PATH = "config/logicflow.yaml"


class NegationMode(Enum):
    PRESERVE = "preserve"
    NORMALIZE = "normalize"
    SIMPLIFY = "simplify"


class TruthValueStyle(Enum):
    BINARY = "0/1"
    LETTERS = "F/T"


class RowOrder(Enum):
    ASCENDING = "0→1"
    DESCENDING = "1→0"

    @classmethod
    def parse(cls, raw: str) -> "RowOrder":
        text = str(raw).strip().replace("->", "→")
        for member in cls:
            if member.value == text or member.name.lower() == text.lower():
                return member
        raise ConfigError(f"Unknown row order: {raw!r}")


def _parse_enum(enum_cls, raw: Any, key: str):
    try:
        return enum_cls(str(raw))
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ConfigError(f"Invalid value {raw!r} for {key}; expected one of: {allowed}") from None


@dataclass(frozen=True)
class EngineSettings:
    """Configuration honoured by the analysis pipeline."""

    negation_handling: NegationMode = NegationMode.PRESERVE
    truth_values: TruthValueStyle = TruthValueStyle.BINARY
    row_order: RowOrder = RowOrder.ASCENDING
    show_sub_expressions: bool = True

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EngineSettings":
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ConfigError("Settings must be a mapping with 'logic' and 'table' sections")
        logic = data.get("logic", {}) or {}
        table = data.get("table", {}) or {}
        if not isinstance(logic, dict) or not isinstance(table, dict):
            raise ConfigError("'logic' and 'table' sections must be mappings")

        defaults = cls()
        return cls(
            negation_handling=_parse_enum(
                NegationMode,
                logic.get("negation_handling", defaults.negation_handling.value),
                "logic.negation_handling",
            ),
            truth_values=_parse_enum(
                TruthValueStyle,
                logic.get("truth_values", defaults.truth_values.value),
                "logic.truth_values",
            ),
            row_order=RowOrder.parse(logic.get("row_order", defaults.row_order.value)),
            show_sub_expressions=bool(table.get("show_sub_expressions", defaults.show_sub_expressions)),
        )

    @classmethod
    def from_file(cls, path: Path | str) -> "EngineSettings":
        path = Path(path)
        if not path.exists():
            raise ConfigError(f"Settings file not found at: {path}")
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except yaml.YAMLError as e:
            raise ConfigError(f"Error parsing YAML file: {path}") from e
        return cls.from_dict(data)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "logic": {
                "negation_handling": self.negation_handling.value,
                "truth_values": self.truth_values.value,
                "row_order": self.row_order.value,
            },
            "table": {"show_sub_expressions": self.show_sub_expressions},
        }


def load_settings_from_env() -> EngineSettings:
    """Load settings from ``$LOGICFLOW_SETTINGS`` when that file exists."""
    config_path = Path(os.getenv(SETTINGS_ENV_VAR, DEFAULT_SETTINGS_PATH))
    if not config_path.exists():
        return EngineSettings()
    try:
        return EngineSettings.from_file(config_path)
    except ConfigError as exc:
        logger.warning("Ignoring settings file %s: %s", config_path, exc)
        return EngineSettings()


def resolve_settings(path: Optional[Path | str] = None) -> EngineSettings:
    """Explicit file wins; otherwise fall back to the environment."""
    if path is not None:
        return EngineSettings.from_file(path)
    return load_settings_from_env()


__all__ = [
    "NegationMode",
    "TruthValueStyle",
    "RowOrder",
    "EngineSettings",
    "load_settings_from_env",
    "resolve_settings",
    "SETTINGS_ENV_VAR",
]
