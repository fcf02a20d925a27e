# game/simulation.py
import logging
from dataclasses import dataclass, field
from typing import List

from game.booster_generator import BoosterGenerator
from game.booster_rules import BoosterRules

logger = logging.getLogger(__name__)


class SimulationError(Exception):
    pass


@dataclass
class SimulationReport:
    """Сколько бустеров пришлось открыть до первой бонусной карты"""

    attempts: List[int] = field(default_factory=list)

    @property
    def trials(self) -> int:
        return len(self.attempts)

    @property
    def mean(self) -> int:
        return sum(self.attempts) // len(self.attempts) if self.attempts else 0

    @property
    def minimum(self) -> int:
        return min(self.attempts, default=0)

    @property
    def maximum(self) -> int:
        return max(self.attempts, default=0)


async def packs_until_bonus(
    generator: BoosterGenerator, rules: BoosterRules, max_packs: int = 10_000
) -> int:
    """Открывать бустеры, пока в одном из них не окажется карта бонусного сета"""
    for opened in range(1, max_packs + 1):
        booster = await generator.generate(rules)
        if booster is None:
            logger.warning(f"Booster #{opened} could not be assembled")
            continue
        if any(card.card_set.is_bonus for card in booster):
            return opened

    raise SimulationError(f"No bonus card in {max_packs} boosters")


async def run_simulation(
    generator: BoosterGenerator, rules: BoosterRules, trials: int, max_packs: int = 10_000
) -> SimulationReport:
    report = SimulationReport()
    for _ in range(trials):
        report.attempts.append(await packs_until_bonus(generator, rules, max_packs))

    logger.info(
        f"✅ Simulation finished: trials={report.trials}, mean={report.mean}, "
        f"min={report.minimum}, max={report.maximum}"
    )
    return report
