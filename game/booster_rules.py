# game/booster_rules.py
import random
from dataclasses import dataclass

from game.cards import CardRarity, CardSet
from game.distribution import ConfigError, WeightedDistribution

# Исходы распределений по индексам
HERO_RARITIES = (CardRarity.SILVER, CardRarity.GOLD)
COMMAND_OPEN_RARITIES = (CardRarity.BRONZE, CardRarity.SILVER, CardRarity.GOLD)
COMMAND_UPGRADE_RARITIES = (CardRarity.SILVER, CardRarity.GOLD)
BASIC_UPGRADE_RARITIES = (CardRarity.SILVER, CardRarity.GOLD)


@dataclass(frozen=True)
class BoosterRules:
    """Правила генерации бустера для одного сета"""

    card_set: CardSet
    bonus_set_chance: float
    hero_rarity: WeightedDistribution
    command_rarity_open: WeightedDistribution
    command_rarity_upgrade: WeightedDistribution
    basic_rarity_upgrade: WeightedDistribution
    # False — карта берется из всей корзины слота, без учета выпавшей редкости
    enforce_rarity: bool = True

    def __post_init__(self):
        if not isinstance(self.card_set, CardSet):
            raise ConfigError(f"Unknown card set: {self.card_set!r}")
        if not 0.0 <= self.bonus_set_chance <= 1.0:
            raise ConfigError("bonus_set_chance must be between 0.0 and 1.0")

        expected = {
            "hero_rarity": HERO_RARITIES,
            "command_rarity_open": COMMAND_OPEN_RARITIES,
            "command_rarity_upgrade": COMMAND_UPGRADE_RARITIES,
            "basic_rarity_upgrade": BASIC_UPGRADE_RARITIES,
        }
        for field_name, outcomes in expected.items():
            distribution = getattr(self, field_name)
            if not isinstance(distribution, WeightedDistribution):
                raise ConfigError(f"{field_name} must be a WeightedDistribution")
            if len(distribution) != len(outcomes):
                raise ConfigError(
                    f"{field_name} must have {len(outcomes)} values, got {len(distribution)}"
                )

    def roll_bonus_substitution(self, rng: random.Random) -> bool:
        """Заменить ли карту слота картой из бонусного сета (бросается на каждый слот)"""
        return rng.random() < self.bonus_set_chance

    def roll_hero_rarity(self, rng: random.Random) -> CardRarity:
        return HERO_RARITIES[self.hero_rarity.draw(rng)]

    def roll_command_rarity_open(self, rng: random.Random) -> CardRarity:
        return COMMAND_OPEN_RARITIES[self.command_rarity_open.draw(rng)]

    def roll_command_rarity_upgrade(self, rng: random.Random) -> CardRarity:
        return COMMAND_UPGRADE_RARITIES[self.command_rarity_upgrade.draw(rng)]

    def roll_basic_rarity_upgrade(self, rng: random.Random) -> CardRarity:
        return BASIC_UPGRADE_RARITIES[self.basic_rarity_upgrade.draw(rng)]
