# game/cards.py
import enum
from dataclasses import dataclass, asdict
from typing import Optional


class CardRarity(enum.Enum):
    BRONZE = "Бронза"
    SILVER = "Серебро"
    GOLD = "Золото"


class CardSlot(enum.Enum):
    """Место карты в бустере"""

    HERO = "Герой"
    COMMAND = "Приказ"
    BASIC_CARD = "Основная карта"


class CardSet(enum.Enum):
    BAZ = "БАЗ"
    KOV = "КОВ"
    HALL_OF_FAME = "Зал Славы"  # Промо-карты, подмешиваются в бустеры любого сета

    @property
    def is_bonus(self) -> bool:
        return self is BONUS_SET


BONUS_SET = CardSet.HALL_OF_FAME


@dataclass(frozen=True)
class Card:
    """Карта из каталога (создается только при загрузке сета)"""

    name: str
    position_in_set: int
    rarity: CardRarity
    slot: CardSlot
    card_set: CardSet
    image_url: Optional[str] = None

    def __str__(self):
        return (
            f"{self.name} [{self.card_set.value} #{self.position_in_set}] "
            f"{self.slot.value}, {self.rarity.value}"
        )

    def to_dict(self) -> dict:
        data = asdict(self)
        data["rarity"] = self.rarity.value
        data["slot"] = self.slot.value
        data["card_set"] = self.card_set.value
        return data
