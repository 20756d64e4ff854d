# cluster_sizer/model/resources.py
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Iterable, Mapping, Tuple, Union

from ..types import CANONICAL_DIMENSIONS, CPUS, MEMORY, dimension_sort_key

Quantity = Union[int, float]


def _normalize(values: Mapping[str, Quantity]) -> Tuple[Tuple[str, Quantity], ...]:
    for dim, qty in values.items():
        if qty < 0:
            raise ValueError(f"Negative quantity for dimension {dim!r}: {qty}")

    merged: Dict[str, Quantity] = {d: 0 for d in CANONICAL_DIMENSIONS}
    for dim, qty in values.items():
        # нулевые неканонические измерения не храним, чтобы сравнение было по значению
        if qty == 0 and dim not in CANONICAL_DIMENSIONS:
            continue
        merged[dim] = qty
    return tuple(sorted(merged.items(), key=lambda kv: dimension_sort_key(kv[0])))


@dataclass(frozen=True)
class ResourceVector:
    """
    Набор неотрицательных количеств по именованным измерениям.

    memory (байты) и cpus (ядра) присутствуют всегда, остальные измерения
    (например storage) можно добавлять без изменения алгоритмов.
    Отсутствующее измерение читается как 0.
    """

    items: Tuple[Tuple[str, Quantity], ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "items", _normalize(dict(self.items)))

    @classmethod
    def of(cls, **quantities: Quantity) -> "ResourceVector":
        return cls(tuple(quantities.items()))

    @classmethod
    def from_mapping(cls, values: Mapping[str, Quantity]) -> "ResourceVector":
        return cls(tuple(values.items()))

    @classmethod
    def zero(cls) -> "ResourceVector":
        return cls()

    # --- access ---

    def __getitem__(self, dim: str) -> Quantity:
        for d, qty in self.items:
            if d == dim:
                return qty
        return 0

    @property
    def memory(self) -> Quantity:
        return self[MEMORY]

    @property
    def cpus(self) -> Quantity:
        return self[CPUS]

    @property
    def dimensions(self) -> Tuple[str, ...]:
        return tuple(d for d, _ in self.items)

    def as_dict(self) -> Dict[str, Quantity]:
        return dict(self.items)

    def is_zero(self) -> bool:
        return all(qty == 0 for _, qty in self.items)

    # --- arithmetic ---

    def _union(self, other: "ResourceVector") -> Iterable[str]:
        dims = set(self.dimensions) | set(other.dimensions)
        return sorted(dims, key=dimension_sort_key)

    def add(self, other: "ResourceVector") -> "ResourceVector":
        return ResourceVector.from_mapping(
            {d: self[d] + other[d] for d in self._union(other)}
        )

    def subtract(self, other: "ResourceVector") -> "ResourceVector":
        """Покомпонентная разность, обрезанная снизу нулём."""
        return ResourceVector.from_mapping(
            {d: max(0, self[d] - other[d]) for d in self._union(other)}
        )

    def delta(self, other: "ResourceVector") -> Dict[str, Quantity]:
        """Знаковая разность self - other; может быть отрицательной, поэтому dict."""
        return {d: self[d] - other[d] for d in self._union(other)}

    def scale(self, factor: Quantity) -> "ResourceVector":
        if factor < 0:
            raise ValueError(f"Negative scale factor: {factor}")
        return ResourceVector.from_mapping({d: qty * factor for d, qty in self.items})

    def scale_dimension(self, dim: str, factor: Quantity) -> "ResourceVector":
        if factor < 0:
            raise ValueError(f"Negative scale factor: {factor}")
        values = self.as_dict()
        values[dim] = self[dim] * factor
        return ResourceVector.from_mapping(values)

    def with_quantity(self, dim: str, qty: Quantity) -> "ResourceVector":
        values = self.as_dict()
        values[dim] = qty
        return ResourceVector.from_mapping(values)

    def fits_within(self, have: "ResourceVector") -> bool:
        return fits_within(self, have)

    __add__ = add
    __sub__ = subtract
    __mul__ = scale
    __rmul__ = scale

    def __str__(self) -> str:
        parts = []
        for dim, qty in self.items:
            if dim == MEMORY:
                parts.append(f"memory={qty / (1024 ** 3):.2f}GiB")
            else:
                parts.append(f"{dim}={qty:g}")
        return "{" + ", ".join(parts) + "}"


def fits_within(need: ResourceVector, have: ResourceVector) -> bool:
    """need[d] <= have[d] для каждого измерения (частичный порядок)."""
    return all(need[d] <= have[d] for d in need._union(have))


def ratio(need: ResourceVector, have: ResourceVector) -> Dict[str, Quantity]:
    """
    Сколько раз need помещается в have по каждому измерению.

    floor(have[d] / need[d]) при need[d] > 0, иначе math.inf:
    нулевая потребность измерение не ограничивает.
    """
    result: Dict[str, Quantity] = {}
    for d in need._union(have):
        if need[d] > 0:
            result[d] = int(have[d] // need[d])
        else:
            result[d] = math.inf
    return result
