"""Structured run logging for corpus loads."""

import json
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any


class RunLogger:
    """JSONL-based structured logger for corpus load runs."""

    def __init__(self, run_dir: Path | str | None = None, run_id: str | None = None):
        self.run_id = run_id or datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S_") + uuid.uuid4().hex[:8]
        self.run_dir = Path(run_dir) if run_dir else Path("runs") / self.run_id
        self.run_dir.mkdir(parents=True, exist_ok=True)
        self._log_file = self.run_dir / "events.jsonl"

    @property
    def log_file(self) -> Path:
        return self._log_file

    def log(self, event_type: str, data: dict[str, Any] | None = None) -> None:
        """Log a structured event."""
        record = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "run_id": self.run_id,
            "event": event_type,
            **(data or {}),
        }
        with open(self._log_file, "a", encoding="utf-8") as f:
            f.write(json.dumps(record) + "\n")

    def log_config(self, config: dict[str, Any]) -> None:
        """Log run configuration."""
        self.log("config", {"config": config})
        (self.run_dir / "config.json").write_text(json.dumps(config, indent=2), encoding="utf-8")

    def log_stage(self, stage: str, seconds: float, **counts: int) -> None:
        """Log completion of a pipeline stage."""
        self.log("stage", {"stage": stage, "seconds": seconds, **counts})

    def log_metric(self, name: str, value: float) -> None:
        """Log a metric value."""
        self.log("metric", {"name": name, "value": value})

    def log_error(self, error: Any) -> None:
        """Log a collected non-fatal error."""
        self.log("error", error.to_dict())

    def read_events(self) -> list[dict[str, Any]]:
        """Read back all events logged so far."""
        if not self._log_file.exists():
            return []
        with open(self._log_file, encoding="utf-8") as f:
            return [json.loads(line) for line in f if line.strip()]
