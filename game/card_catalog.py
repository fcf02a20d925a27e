# game/card_catalog.py
import asyncio
import logging
import random
from dataclasses import dataclass
from typing import Dict, List, Optional, Protocol, Tuple

from game.cards import BONUS_SET, Card, CardRarity, CardSet, CardSlot

logger = logging.getLogger(__name__)


class CatalogError(Exception):
    """Не удалось загрузить сет в каталог"""


class UnknownClassificationError(CatalogError):
    """Редкость, слот или сет из хранилища не распознаны"""


class CatalogStoreError(CatalogError):
    """Хранилище карт недоступно или вернуло ошибку"""


@dataclass(frozen=True)
class CardRecord:
    """Строка из хранилища карт, все классификации — сырые строки"""

    name: str
    position_in_set: int
    rarity_name: str
    slot_name: str
    set_name: str
    image_url: Optional[str] = None


class CardStore(Protocol):
    async def fetch_set(self, card_set: CardSet) -> List[CardRecord]:
        ...


def _parse_position(value) -> int:
    # Номер в сете приходит целым числом или строкой из цифр
    if isinstance(value, bool):
        raise TypeError(f"position in set must be an integer, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        return int(value)
    raise TypeError(f"position in set must be an integer, got {value!r}")


def card_from_record(record: CardRecord) -> Card:
    """Перевести строки хранилища в закрытые перечисления"""
    try:
        rarity = CardRarity(record.rarity_name)
        slot = CardSlot(record.slot_name)
        card_set = CardSet(record.set_name)
        position = _parse_position(record.position_in_set)
    except (TypeError, ValueError) as e:
        raise UnknownClassificationError(f"Card {record.name!r}: {e}") from e

    if position < 1:
        raise UnknownClassificationError(
            f"Card {record.name!r}: position in set must be positive, got {position}"
        )

    return Card(
        name=record.name,
        position_in_set=position,
        rarity=rarity,
        slot=slot,
        card_set=card_set,
        image_url=record.image_url,
    )


class CardCatalog:
    """
    Кэш карт в памяти: (слот, сет) -> список карт.

    Сеты подгружаются из хранилища по требованию, целиком по всем трем слотам.
    Бонусный сет загружается при создании через CardCatalog.create().
    """

    def __init__(self, store: CardStore):
        self.store = store
        self._buckets: Dict[Tuple[CardSlot, CardSet], List[Card]] = {}
        self._locks: Dict[CardSet, asyncio.Lock] = {}

    @classmethod
    async def create(cls, store: CardStore) -> "CardCatalog":
        catalog = cls(store)
        await catalog.ensure_loaded(BONUS_SET)
        return catalog

    def has_set(self, card_set: CardSet) -> bool:
        return all((slot, card_set) in self._buckets for slot in CardSlot)

    def loaded_sets(self) -> List[CardSet]:
        return [card_set for card_set in CardSet if self.has_set(card_set)]

    def __len__(self) -> int:
        return sum(len(cards) for cards in self._buckets.values())

    def bucket(self, slot: CardSlot, card_set: CardSet) -> Tuple[Card, ...]:
        return tuple(self._buckets.get((slot, card_set), ()))

    async def ensure_loaded(self, card_set: CardSet) -> None:
        """Загрузить сет, если его еще нет. Повторный вызов ничего не делает"""
        if self.has_set(card_set):
            return

        lock = self._locks.setdefault(card_set, asyncio.Lock())
        async with lock:
            # Пока ждали блокировку, сет мог загрузить другой вызов
            if self.has_set(card_set):
                return

            try:
                records = await self._fetch(card_set)
                buckets: Dict[CardSlot, List[Card]] = {slot: [] for slot in CardSlot}
                for record in records:
                    card = card_from_record(record)
                    buckets[card.slot].append(card)
            except CatalogError as e:
                logger.error(f"❌ Set {card_set.value} failed to load: {e}")
                raise

            for slot, cards in buckets.items():
                self._buckets[(slot, card_set)] = cards

            counts = ", ".join(f"{slot.name}={len(cards)}" for slot, cards in buckets.items())
            logger.info(f"✅ Set {card_set.value} loaded: {counts}")

    async def _fetch(self, card_set: CardSet) -> List[CardRecord]:
        try:
            return await self.store.fetch_set(card_set)
        except CatalogError:
            raise
        except Exception as e:
            raise CatalogStoreError(f"Card store unavailable: {e}") from e

    def draw(
        self,
        slot: CardSlot,
        card_set: CardSet,
        prefer_bonus: bool,
        rng: random.Random,
        rarity: Optional[CardRarity] = None,
    ) -> Optional[Card]:
        """
        Случайная карта для слота.

        При prefer_bonus сначала пробуем бонусный сет, если там пусто —
        целевой сет. rarity сужает выбор до карт этой редкости,
        без нее выбор равномерный по всей корзине.
        None — подходящих карт нет.
        """
        if prefer_bonus:
            card = self._choose(slot, BONUS_SET, rng, rarity)
            if card is not None:
                return card
        return self._choose(slot, card_set, rng, rarity)

    def _choose(
        self,
        slot: CardSlot,
        card_set: CardSet,
        rng: random.Random,
        rarity: Optional[CardRarity],
    ) -> Optional[Card]:
        cards = self._buckets.get((slot, card_set), [])
        if rarity is not None:
            cards = [card for card in cards if card.rarity is rarity]
        if not cards:
            return None
        return rng.choice(cards)
