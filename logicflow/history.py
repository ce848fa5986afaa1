from __future__ import annotations

import json
import time
import uuid
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, TextIO


@dataclass(frozen=True)
class HistoryItem:
    """One analyzed formula, as remembered by the presentation layer."""

    expression: str
    variables: List[str]
    classification: Optional[str] = None
    timestamp: float = field(default_factory=time.time)
    id: str = field(default_factory=lambda: uuid.uuid4().hex)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HistoryItem":
        return cls(
            expression=str(data["expression"]),
            variables=list(data.get("variables", [])),
            classification=data.get("classification"),
            timestamp=float(data.get("timestamp", 0.0)),
            id=str(data.get("id", "")),
        )


class HistoryLog:
    """Append-only JSONL history.

    Each ``append`` writes exactly one compact JSON object line (UTF-8,
    non-ASCII kept literal) and flushes before returning.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        if self._path.parent and not self._path.parent.exists():
            self._path.parent.mkdir(parents=True, exist_ok=True)
        self._file: Optional[TextIO] = None

    @property
    def path(self) -> Path:
        return self._path

    def append(self, item: HistoryItem) -> None:
        if self._file is None:
            self._file = self._path.open("a", encoding="utf-8")
        line = json.dumps(asdict(item), separators=(",", ":"), ensure_ascii=False)
        self._file.write(f"{line}\n")
        self._file.flush()

    def record(self, expression: str, variables: Sequence[str], classification: Optional[str]) -> HistoryItem:
        item = HistoryItem(expression=expression, variables=list(variables), classification=classification)
        self.append(item)
        return item

    def read_all(self) -> List[HistoryItem]:
        if not self._path.exists():
            return []
        items = []
        with self._path.open("r", encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if line:
                    items.append(HistoryItem.from_dict(json.loads(line)))
        return items

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None

    def __enter__(self) -> "HistoryLog":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


__all__ = ["HistoryItem", "HistoryLog"]
