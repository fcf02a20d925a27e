# game/distribution.py
import sys
import random
from typing import Sequence, Tuple


class ConfigError(ValueError):
    """Неверная конфигурация бустера или распределения"""


class WeightedDistribution:
    """
    Дискретное распределение фиксированной размерности.

    values[i] — вероятность исхода i. Все значения лежат в [0, 1],
    сумма равна 1.0 с точностью до машинного эпсилон.
    Объект неизменяемый, состояние живет только в генераторе случайных чисел.
    """

    __slots__ = ("_values",)

    def __init__(self, values: Sequence[float]):
        values = tuple(float(v) for v in values)
        if not values:
            raise ConfigError("Distribution must have at least one value")
        if any(not 0.0 <= v <= 1.0 for v in values):
            raise ConfigError("Distribution values must be between 0.0 and 1.0")
        if abs(1.0 - sum(values)) > sys.float_info.epsilon:
            raise ConfigError(f"Sum of distribution values must be 1.0, got {sum(values)}")
        self._values = values

    @property
    def values(self) -> Tuple[float, ...]:
        return self._values

    def __len__(self) -> int:
        return len(self._values)

    def __eq__(self, other):
        if not isinstance(other, WeightedDistribution):
            return NotImplemented
        return self._values == other._values

    def __hash__(self):
        return hash(self._values)

    def __repr__(self):
        return f"WeightedDistribution({list(self._values)})"

    def generate(self, sample: float) -> int:
        """Индекс исхода от 0 до N-1 для равномерного sample из [0, 1)"""
        cumulative = 0.0
        for index, value in enumerate(self._values):
            cumulative += value
            # исход с нулевой вероятностью не выпадает даже при sample == 0.0
            if value > 0.0 and sample <= cumulative:
                return index
        # Накопленная сумма может не дотянуть до sample из-за округления,
        # тогда берем последний исход с ненулевой вероятностью
        for index in range(len(self._values) - 1, -1, -1):
            if self._values[index] > 0.0:
                return index
        return len(self._values) - 1

    def draw(self, rng: random.Random) -> int:
        return self.generate(rng.random())
