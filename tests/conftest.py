import random
from typing import Dict, List

import pytest

from game.card_catalog import CardRecord
from game.cards import CardRarity, CardSet, CardSlot
from game.distribution import WeightedDistribution
from game.booster_rules import BoosterRules


def record(name, slot, rarity, card_set=CardSet.KOV, position=1, image_url=None) -> CardRecord:
    return CardRecord(
        name=name,
        position_in_set=position,
        rarity_name=rarity.value,
        slot_name=slot.value,
        set_name=card_set.value,
        image_url=image_url,
    )


def full_set(card_set: CardSet) -> List[CardRecord]:
    """По одной карте каждой редкости на каждый слот"""
    records = []
    position = 1
    for slot in CardSlot:
        for rarity in CardRarity:
            records.append(
                record(f"{card_set.name} {slot.name} {rarity.name}", slot, rarity, card_set, position)
            )
            position += 1
    return records


class FakeStore:
    """Хранилище в памяти, считает обращения"""

    def __init__(self, sets: Dict[CardSet, List[CardRecord]]):
        self.sets = sets
        self.calls: List[CardSet] = []

    async def fetch_set(self, card_set: CardSet) -> List[CardRecord]:
        self.calls.append(card_set)
        return list(self.sets.get(card_set, []))


class ScriptedRandom(random.Random):
    """random() отдает заранее заданные значения по кругу"""

    def __init__(self, samples):
        super().__init__(0)
        self.samples = list(samples)
        self.index = 0

    def random(self):
        value = self.samples[self.index % len(self.samples)]
        self.index += 1
        return value


def make_rules(
    card_set=CardSet.KOV,
    bonus_set_chance=0.0,
    hero=(0.5, 0.5),
    command_open=(0.8, 0.15, 0.05),
    command_upgrade=(0.5, 0.5),
    basic_upgrade=(0.5, 0.5),
    enforce_rarity=True,
) -> BoosterRules:
    return BoosterRules(
        card_set=card_set,
        bonus_set_chance=bonus_set_chance,
        hero_rarity=WeightedDistribution(hero),
        command_rarity_open=WeightedDistribution(command_open),
        command_rarity_upgrade=WeightedDistribution(command_upgrade),
        basic_rarity_upgrade=WeightedDistribution(basic_upgrade),
        enforce_rarity=enforce_rarity,
    )


@pytest.fixture
def rng():
    return random.Random(42)


@pytest.fixture
def hall_of_fame_records():
    # В Зале Славы только золотые герои и основные карты, приказов нет
    return [
        record("Легенда героя", CardSlot.HERO, CardRarity.GOLD, CardSet.HALL_OF_FAME, 1),
        record("Легенда карты", CardSlot.BASIC_CARD, CardRarity.GOLD, CardSet.HALL_OF_FAME, 2),
    ]


@pytest.fixture
def store(hall_of_fame_records):
    return FakeStore({
        CardSet.KOV: full_set(CardSet.KOV),
        CardSet.BAZ: full_set(CardSet.BAZ),
        CardSet.HALL_OF_FAME: hall_of_fame_records,
    })
