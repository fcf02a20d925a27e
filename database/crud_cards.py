from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from typing import Iterable, List, Optional
import logging

from database.models.card import Card, CardSetRow, CardType, Rarity
from database.base import AsyncSessionLocal
from game.card_catalog import CardRecord, CatalogStoreError
from game.cards import CardSet

logger = logging.getLogger(__name__)


class SqlCardStore:
    """Чтение карт сета из БД для CardCatalog"""

    def __init__(self, session_factory: Optional[async_sessionmaker] = None):
        self.session_factory = session_factory or AsyncSessionLocal

    async def fetch_set(self, card_set: CardSet) -> List[CardRecord]:
        try:
            async with self.session_factory() as session:
                result = await session.execute(
                    select(
                        Card.name,
                        Card.id_in_set,
                        Rarity.name,
                        CardType.name,
                        CardSetRow.short_name,
                        Card.image_url,
                    )
                    .select_from(Card)
                    .join(Rarity, Card.rarity_id == Rarity.id)
                    .join(CardType, Card.type_id == CardType.id)
                    .join(CardSetRow, Card.set_id == CardSetRow.id)
                    .where(CardSetRow.short_name == card_set.value)
                )
                rows = result.all()
        except SQLAlchemyError as e:
            logger.error(f"❌ Card store query for {card_set.value} failed: {e}")
            raise CatalogStoreError(f"Card store unavailable: {e}") from e

        logger.info(f"Fetched {len(rows)} cards of set {card_set.value}")
        return [
            CardRecord(
                name=name,
                position_in_set=id_in_set,
                rarity_name=rarity_name,
                slot_name=slot_name,
                set_name=set_name,
                image_url=image_url,
            )
            for name, id_in_set, rarity_name, slot_name, set_name, image_url in rows
        ]


async def get_or_create_reference(session: AsyncSession, model, **values):
    """Найти строку справочника или создать ее"""
    result = await session.execute(select(model).filter_by(**values))
    row = result.scalar_one_or_none()
    if row:
        return row

    row = model(**values)
    session.add(row)
    await session.flush()
    return row


async def add_cards(session: AsyncSession, records: Iterable[CardRecord]) -> int:
    """Записать карты в хранилище (вспомогательная функция для тестов)"""
    added = 0
    for record in records:
        rarity = await get_or_create_reference(session, Rarity, name=record.rarity_name)
        card_type = await get_or_create_reference(session, CardType, name=record.slot_name)
        card_set = await get_or_create_reference(session, CardSetRow, short_name=record.set_name)
        session.add(
            Card(
                name=record.name,
                id_in_set=record.position_in_set,
                rarity_id=rarity.id,
                type_id=card_type.id,
                set_id=card_set.id,
                image_url=record.image_url,
            )
        )
        added += 1

    await session.commit()
    return added
