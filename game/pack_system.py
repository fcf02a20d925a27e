# game/pack_system.py
from game.booster_rules import BoosterRules
from game.cards import CardSet
from game.distribution import WeightedDistribution

BOOSTER_SETTINGS = {
    "standard": {
        "bonus_set_chance": 0.02,
        "hero_rarity": [0.8, 0.2],  # серебро / золото
        "command_rarity_open": [0.7, 0.2, 0.1],  # бронза / серебро / золото
        "command_rarity_upgrade": [0.75, 0.25],
        "basic_rarity_upgrade": [0.7, 0.3],
        "enforce_rarity": True,
    }
}


def build_rules(card_set: CardSet, preset: str = "standard", **overrides) -> BoosterRules:
    """Собрать правила бустера из пресета, overrides заменяют значения пресета"""
    settings = {**BOOSTER_SETTINGS[preset], **overrides}
    return BoosterRules(
        card_set=card_set,
        bonus_set_chance=settings["bonus_set_chance"],
        hero_rarity=WeightedDistribution(settings["hero_rarity"]),
        command_rarity_open=WeightedDistribution(settings["command_rarity_open"]),
        command_rarity_upgrade=WeightedDistribution(settings["command_rarity_upgrade"]),
        basic_rarity_upgrade=WeightedDistribution(settings["basic_rarity_upgrade"]),
        enforce_rarity=settings["enforce_rarity"],
    )
