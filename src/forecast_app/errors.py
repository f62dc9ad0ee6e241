from __future__ import annotations

from typing import List, Sequence


class ConfigurationError(ValueError):
    def __init__(self, problems: Sequence[str]) -> None:
        self.problems: List[str] = list(problems)
        super().__init__("; ".join(self.problems) or "invalid configuration")


class SimulationCancelled(RuntimeError):
    def __init__(self, completed: int, requested: int) -> None:
        self.completed = completed
        self.requested = requested
        super().__init__(f"Simulation cancelled after {completed} of {requested} runs")
