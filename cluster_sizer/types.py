# cluster_sizer/types.py
from __future__ import annotations

from typing import NewType, Tuple


# Имена измерений ресурсов
Dimension = NewType("Dimension", str)

MEMORY = Dimension("memory")
CPUS = Dimension("cpus")

# Порядок измерений при выводе и при разрешении ничьих в fit():
# сначала memory, потом cpus, остальные (storage и т.п.) по алфавиту.
CANONICAL_DIMENSIONS: Tuple[Dimension, ...] = (MEMORY, CPUS)

# Ресурсы
Bytes = NewType("Bytes", int)  # байты
Cpus = NewType("Cpus", int)    # ядра (абстрактные core units)

MI_B = 1024 * 1024
GI_B = MI_B * 1024


def dimension_sort_key(dim: str) -> Tuple[int, str]:
    """Ключ сортировки измерений: канонические первыми, остальные по имени."""
    try:
        return (CANONICAL_DIMENSIONS.index(Dimension(dim)), "")
    except ValueError:
        return (len(CANONICAL_DIMENSIONS), dim)
