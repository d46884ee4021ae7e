"""Signal generators and the ordered processor that assembles feature vectors."""
from __future__ import annotations

import math
from collections import Counter
from enum import Enum
from typing import Iterable, List, Protocol, Sequence, Tuple

from .models import LogData


class SignalGenerator(Protocol):
    """A named pure function mapping :class:`LogData` to one real-valued feature."""

    @property
    def name(self) -> str:
        ...

    def generate(self, log_data: LogData) -> float:
        ...


def levenshtein_distance(source: str, target: str) -> int:
    """Minimum number of single-character edits turning ``source`` into ``target``."""

    rows = len(source) + 1
    cols = len(target) + 1
    table = [[0] * cols for _ in range(rows)]
    for i in range(rows):
        table[i][0] = i
    for j in range(cols):
        table[0][j] = j

    for i in range(1, rows):
        for j in range(1, cols):
            cost = 0 if source[i - 1] == target[j - 1] else 1
            table[i][j] = min(
                table[i - 1][j] + 1,
                table[i][j - 1] + 1,
                table[i - 1][j - 1] + cost,
            )
    return table[-1][-1]


def shannon_entropy(value: str) -> float:
    """Shannon entropy in bits of the symbol distribution of ``value``."""

    if not value:
        return 0.0
    length = len(value)
    entropy = 0.0
    for count in Counter(value).values():
        probability = count / length
        entropy -= probability * math.log2(probability)
    return entropy


def _string_pair(log_data: LogData, field_name: str) -> Tuple[str, str] | None:
    before, after = log_data.values_for(field_name)
    if isinstance(before, str) and isinstance(after, str):
        return before, after
    return None


class FieldEditDistanceGenerator:
    """Levenshtein distance between the before and after value of one field."""

    def __init__(self, field_name: str) -> None:
        self.field_name = field_name

    @property
    def name(self) -> str:
        return f"Levenshtein({self.field_name})"

    def generate(self, log_data: LogData) -> float:
        pair = _string_pair(log_data, self.field_name)
        if pair is None:
            return 0.0
        return float(levenshtein_distance(*pair))

    def __repr__(self) -> str:
        return f"FieldEditDistanceGenerator({self.field_name!r})"


class FieldEntropyDeltaGenerator:
    """Change in Shannon entropy of one field, ``H(after) - H(before)``."""

    def __init__(self, field_name: str) -> None:
        self.field_name = field_name

    @property
    def name(self) -> str:
        return f"Entropy({self.field_name})"

    def generate(self, log_data: LogData) -> float:
        pair = _string_pair(log_data, self.field_name)
        if pair is None:
            return 0.0
        before, after = pair
        return shannon_entropy(after) - shannon_entropy(before)

    def __repr__(self) -> str:
        return f"FieldEntropyDeltaGenerator({self.field_name!r})"


class SignalProcessor:
    """Ordered registry of signal generators.

    Registration order is output order; position ``i`` of every vector produced
    by the same processor always refers to the ``i``-th registered generator.
    """

    def __init__(self, generators: Iterable[SignalGenerator] = ()) -> None:
        self._generators: List[SignalGenerator] = []
        self._names: List[str] = []
        for generator in generators:
            self.add_generator(generator)

    def add_generator(self, generator: SignalGenerator) -> None:
        self._generators.append(generator)
        self._names.append(generator.name)

    @property
    def names(self) -> Sequence[str]:
        return tuple(self._names)

    @property
    def generators(self) -> Sequence[SignalGenerator]:
        return tuple(self._generators)

    def __len__(self) -> int:
        return len(self._generators)

    def generate_vector(self, log_data: LogData) -> List[float]:
        return [float(generator.generate(log_data)) for generator in self._generators]


class SignalType(str, Enum):
    ALL = "All"
    LEVENSHTEIN = "Levenshtein"
    ENTROPY = "Entropy"

    @classmethod
    def parse(cls, value: str | "SignalType") -> "SignalType":
        if isinstance(value, SignalType):
            return value
        for member in cls:
            if member.value.lower() == value.strip().lower():
                return member
        raise ValueError(f"Unsupported signal type: {value}")


def build_processor(field_name: str, signal_types: Iterable[str | SignalType] = ()) -> SignalProcessor:
    """Create a processor for ``field_name`` with the selected generators.

    Edit distance is always registered before entropy delta; an empty
    selection behaves like ``All``.
    """

    selected = {SignalType.parse(value) for value in signal_types} or {SignalType.ALL}
    use_all = SignalType.ALL in selected

    processor = SignalProcessor()
    if use_all or SignalType.LEVENSHTEIN in selected:
        processor.add_generator(FieldEditDistanceGenerator(field_name))
    if use_all or SignalType.ENTROPY in selected:
        processor.add_generator(FieldEntropyDeltaGenerator(field_name))
    return processor


__all__ = [
    "FieldEditDistanceGenerator",
    "FieldEntropyDeltaGenerator",
    "SignalGenerator",
    "SignalProcessor",
    "SignalType",
    "build_processor",
    "levenshtein_distance",
    "shannon_entropy",
]
