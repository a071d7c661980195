"""Stage timing for corpus loads."""

import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Generator


@dataclass
class ProfileResult:
    """Result of one timed section."""

    name: str
    duration_seconds: float
    extra: dict[str, Any] = field(default_factory=dict)


class Profiler:
    """Simple profiler for tracking per-stage execution time."""

    def __init__(self) -> None:
        self.results: list[ProfileResult] = []
        self._start_times: dict[str, float] = {}

    def start(self, name: str) -> None:
        """Start timing a section."""
        self._start_times[name] = time.perf_counter()

    def stop(self, name: str, extra: dict[str, Any] | None = None) -> ProfileResult:
        """Stop timing and record result."""
        if name not in self._start_times:
            raise ValueError(f"Timer '{name}' was not started")

        duration = time.perf_counter() - self._start_times.pop(name)
        result = ProfileResult(name=name, duration_seconds=duration, extra=extra or {})
        self.results.append(result)
        return result

    @contextmanager
    def section(self, name: str) -> Generator[None, None, None]:
        """Context manager for profiling a section."""
        self.start(name)
        try:
            yield
        finally:
            self.stop(name)

    def timings(self) -> dict[str, float]:
        """Total seconds per section name, in first-seen order."""
        totals: dict[str, float] = {}
        for r in self.results:
            totals[r.name] = totals.get(r.name, 0.0) + r.duration_seconds
        return {name: round(seconds, 6) for name, seconds in totals.items()}

    def report(self) -> str:
        """Generate profiling report."""
        lines = ["# Performance Profile", ""]
        lines.append("| Section | Total (s) |")
        lines.append("|---------|-----------|")
        for name, seconds in sorted(self.timings().items(), key=lambda x: -x[1]):
            lines.append(f"| {name} | {seconds:.4f} |")
        return "\n".join(lines)
