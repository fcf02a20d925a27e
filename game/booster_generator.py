# game/booster_generator.py
import logging
import random
from typing import Callable, List, NamedTuple, Optional, Tuple

from game.booster_rules import BoosterRules
from game.card_catalog import CardCatalog, CatalogError
from game.cards import Card, CardRarity, CardSlot

logger = logging.getLogger(__name__)

BOOSTER_SIZE = 18

Booster = Tuple[Card, ...]


class SlotRoll(NamedTuple):
    """Что выпало на позиции бустера до выбора конкретной карты"""

    position: int
    slot: CardSlot
    rarity: CardRarity
    bonus: bool


def _fixed(rarity: CardRarity) -> Callable[[BoosterRules, random.Random], CardRarity]:
    return lambda rules, rng: rarity


# Состав бустера: слот и способ выбрать редкость для каждой позиции
PACK_RECIPE = (
    (CardSlot.HERO, BoosterRules.roll_hero_rarity),
    (CardSlot.COMMAND, BoosterRules.roll_command_rarity_open),
    (CardSlot.COMMAND, BoosterRules.roll_command_rarity_upgrade),
    (CardSlot.COMMAND, _fixed(CardRarity.BRONZE)),
    (CardSlot.BASIC_CARD, _fixed(CardRarity.GOLD)),
    (CardSlot.BASIC_CARD, BoosterRules.roll_basic_rarity_upgrade),
    (CardSlot.BASIC_CARD, _fixed(CardRarity.SILVER)),
) + ((CardSlot.BASIC_CARD, _fixed(CardRarity.BRONZE)),) * 11


def roll_recipe(rules: BoosterRules, rng: random.Random) -> List[SlotRoll]:
    """Бросить редкость и бонусный шанс для всех 18 позиций"""
    rolls = []
    for position, (slot, roll_rarity) in enumerate(PACK_RECIPE):
        rarity = roll_rarity(rules, rng)
        bonus = rules.roll_bonus_substitution(rng)
        rolls.append(SlotRoll(position, slot, rarity, bonus))
    return rolls


class BoosterGenerator:
    """
    Сборка бустеров из каталога.

    assemble() не делает ввода-вывода и требует уже загруженный сет,
    generate() при необходимости сначала подгружает сет из хранилища.
    """

    def __init__(self, catalog: CardCatalog, rng: Optional[random.Random] = None):
        self.catalog = catalog
        self.rng = rng if rng is not None else random.Random()

    def assemble(self, rules: BoosterRules) -> Optional[Booster]:
        booster, _ = self.assemble_with_recipe(rules)
        return booster

    def assemble_with_recipe(self, rules: BoosterRules) -> Tuple[Optional[Booster], List[SlotRoll]]:
        """Бустер вместе с выпавшим составом, бустер None если сборка не удалась"""
        if not self.catalog.has_set(rules.card_set):
            raise CatalogError(f"Set {rules.card_set.value} is not loaded")

        recipe = roll_recipe(rules, self.rng)

        booster = []
        for roll in recipe:
            card = self.catalog.draw(
                roll.slot,
                rules.card_set,
                roll.bonus,
                self.rng,
                rarity=roll.rarity if rules.enforce_rarity else None,
            )
            if card is None:
                logger.warning(
                    f"⚠️ No card for position {roll.position}: slot={roll.slot.name}, "
                    f"set={rules.card_set.value}, rarity={roll.rarity.name}, bonus={roll.bonus}"
                )
                return None, recipe
            booster.append(card)

        return tuple(booster), recipe

    async def generate(self, rules: BoosterRules) -> Optional[Booster]:
        booster, _ = await self.generate_with_recipe(rules)
        return booster

    async def generate_with_recipe(self, rules: BoosterRules) -> Tuple[Optional[Booster], List[SlotRoll]]:
        if not self.catalog.has_set(rules.card_set):
            await self.catalog.ensure_loaded(rules.card_set)
        return self.assemble_with_recipe(rules)


async def generate(
    catalog: CardCatalog, rules: BoosterRules, rng: random.Random
) -> Optional[Booster]:
    return await BoosterGenerator(catalog, rng).generate(rules)
