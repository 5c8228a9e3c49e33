import time
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional


class StepTimer:
    """Accumulates duration and call count per named step.

    Ink scans run many times per annotation run, so each step keeps a
    running total instead of a single measurement.
    """

    def __init__(self) -> None:
        self._durations: Dict[str, float] = {}
        self._counts: Dict[str, int] = {}

    @contextmanager
    def time_step(self, name: str, echo: bool = False) -> Iterator[None]:
        start = time.perf_counter()
        try:
            yield
        finally:
            duration = time.perf_counter() - start
            self._durations[name] = self._durations.get(name, 0.0) + duration
            self._counts[name] = self._counts.get(name, 0) + 1
            if echo:
                print(f"[TIME] {name}: {duration:.3f}s")

    def get(self, name: str) -> Optional[float]:
        return self._durations.get(name)

    def count(self, name: str) -> int:
        return self._counts.get(name, 0)

    def to_lines(self) -> List[str]:
        lines: List[str] = []
        for key, seconds in self._durations.items():
            calls = self._counts.get(key, 0)
            lines.append(f"{key}: {seconds:.3f}s over {calls} call(s)")
        return lines
