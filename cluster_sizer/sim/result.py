# cluster_sizer/sim/result.py
from __future__ import annotations

from dataclasses import dataclass

UNCONSTRAINED = "none"


@dataclass(frozen=True)
class FitResult:
    """Сколько инстансов влезает и какое измерение это ограничивает."""
    count: int
    binding: str = UNCONSTRAINED

    @property
    def constrained(self) -> bool:
        return self.binding != UNCONSTRAINED

    def __str__(self) -> str:
        return f"{self.count} constrained by {self.binding}"


@dataclass(frozen=True)
class Infeasible:
    """
    Обратный расчёт не нашёл топологию в пределах max_worker_nodes.

    best_count: сколько инстансов влезает на самой большой проверенной
    топологии, чтобы было видно, насколько далеко до цели.
    """
    target_count: int
    instance_type: str
    max_worker_nodes: int
    best_count: int
    reason: str

    def __str__(self) -> str:
        return (
            f"Infeasible: {self.target_count} x {self.instance_type} "
            f"(best {self.best_count} with {self.max_worker_nodes} workers): {self.reason}"
        )
