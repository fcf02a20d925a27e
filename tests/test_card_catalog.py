import asyncio
import dataclasses
from unittest.mock import AsyncMock

import pytest

from game.card_catalog import (
    CardCatalog,
    CatalogStoreError,
    UnknownClassificationError,
    card_from_record,
)
from game.cards import CardRarity, CardSet, CardSlot

from tests.conftest import FakeStore, full_set, record


@pytest.mark.asyncio
async def test_create_loads_bonus_set(store):
    catalog = await CardCatalog.create(store)

    assert catalog.has_set(CardSet.HALL_OF_FAME)
    assert not catalog.has_set(CardSet.KOV)
    assert store.calls == [CardSet.HALL_OF_FAME]
    assert catalog.loaded_sets() == [CardSet.HALL_OF_FAME]


@pytest.mark.asyncio
async def test_ensure_loaded_fills_all_slots(store):
    catalog = await CardCatalog.create(store)
    await catalog.ensure_loaded(CardSet.KOV)

    assert catalog.has_set(CardSet.KOV)
    for slot in CardSlot:
        cards = catalog.bucket(slot, CardSet.KOV)
        assert len(cards) == 3
        assert all(card.slot is slot for card in cards)
    assert len(catalog) == 9 + 2


@pytest.mark.asyncio
async def test_ensure_loaded_is_idempotent():
    fake = AsyncMock()
    fake.fetch_set.return_value = full_set(CardSet.KOV)
    catalog = CardCatalog(fake)

    await catalog.ensure_loaded(CardSet.KOV)
    await catalog.ensure_loaded(CardSet.KOV)

    fake.fetch_set.assert_awaited_once_with(CardSet.KOV)
    assert len(catalog.bucket(CardSlot.HERO, CardSet.KOV)) == 3


@pytest.mark.asyncio
async def test_concurrent_loads_of_one_set_fetch_once():
    class SlowStore(FakeStore):
        async def fetch_set(self, card_set):
            await asyncio.sleep(0.01)
            return await super().fetch_set(card_set)

    slow = SlowStore({CardSet.KOV: full_set(CardSet.KOV)})
    catalog = CardCatalog(slow)

    await asyncio.gather(*(catalog.ensure_loaded(CardSet.KOV) for _ in range(5)))

    assert slow.calls == [CardSet.KOV]
    assert len(catalog.bucket(CardSlot.BASIC_CARD, CardSet.KOV)) == 3


@pytest.mark.asyncio
async def test_loaded_but_empty_set_differs_from_not_loaded():
    catalog = CardCatalog(FakeStore({}))
    assert not catalog.has_set(CardSet.BAZ)

    await catalog.ensure_loaded(CardSet.BAZ)

    assert catalog.has_set(CardSet.BAZ)
    assert catalog.bucket(CardSlot.HERO, CardSet.BAZ) == ()


@pytest.mark.asyncio
@pytest.mark.parametrize("bad_field", ["rarity_name", "slot_name", "set_name"])
async def test_unknown_classification_aborts_whole_load(bad_field):
    records = full_set(CardSet.KOV)
    records[4] = dataclasses.replace(records[4], **{bad_field: "Платина"})
    catalog = CardCatalog(FakeStore({CardSet.KOV: records}))

    with pytest.raises(UnknownClassificationError):
        await catalog.ensure_loaded(CardSet.KOV)

    assert not catalog.has_set(CardSet.KOV)
    assert len(catalog) == 0


@pytest.mark.asyncio
async def test_failed_load_can_be_retried():
    fake = AsyncMock()
    fake.fetch_set.side_effect = [CatalogStoreError("database is locked"), full_set(CardSet.KOV)]
    catalog = CardCatalog(fake)

    with pytest.raises(CatalogStoreError):
        await catalog.ensure_loaded(CardSet.KOV)
    assert not catalog.has_set(CardSet.KOV)

    await catalog.ensure_loaded(CardSet.KOV)
    assert catalog.has_set(CardSet.KOV)


@pytest.mark.asyncio
async def test_unreachable_store_raises_store_error(caplog):
    fake = AsyncMock()
    fake.fetch_set.side_effect = ConnectionError("store unreachable")
    catalog = CardCatalog(fake)

    with pytest.raises(CatalogStoreError) as exc_info:
        await catalog.ensure_loaded(CardSet.KOV)

    assert isinstance(exc_info.value.__cause__, ConnectionError)
    assert not catalog.has_set(CardSet.KOV)
    assert "failed to load" in caplog.text


@pytest.mark.parametrize("position", [0, -3, 2.7, True, None, "седьмая"])
def test_card_from_record_rejects_bad_position(position):
    with pytest.raises(UnknownClassificationError):
        card_from_record(record("Без номера", CardSlot.HERO, CardRarity.GOLD, position=position))


def test_card_from_record_accepts_numeric_string_position():
    card = card_from_record(record("Строкой", CardSlot.HERO, CardRarity.GOLD, position="7"))
    assert card.position_in_set == 7


def test_card_from_record_maps_strings():
    card = card_from_record(
        record("Вождь", CardSlot.HERO, CardRarity.SILVER, CardSet.BAZ, 12, "https://example.org/1.webp")
    )
    assert card.slot is CardSlot.HERO
    assert card.rarity is CardRarity.SILVER
    assert card.card_set is CardSet.BAZ
    assert card.position_in_set == 12
    assert card.image_url == "https://example.org/1.webp"


@pytest.mark.asyncio
async def test_draw_prefers_bonus_set(store, rng):
    catalog = await CardCatalog.create(store)
    await catalog.ensure_loaded(CardSet.KOV)

    card = catalog.draw(CardSlot.BASIC_CARD, CardSet.KOV, True, rng)

    assert card.card_set is CardSet.HALL_OF_FAME


@pytest.mark.asyncio
async def test_draw_falls_back_when_bonus_bucket_empty(store, rng):
    catalog = await CardCatalog.create(store)
    await catalog.ensure_loaded(CardSet.KOV)

    card = catalog.draw(CardSlot.COMMAND, CardSet.KOV, True, rng)

    assert card.card_set is CardSet.KOV
    assert card.slot is CardSlot.COMMAND


@pytest.mark.asyncio
async def test_draw_returns_none_when_both_buckets_empty(store, rng):
    catalog = await CardCatalog.create(store)

    assert catalog.draw(CardSlot.COMMAND, CardSet.HALL_OF_FAME, True, rng) is None


@pytest.mark.asyncio
async def test_draw_without_bonus_uses_target_set(store, rng):
    catalog = await CardCatalog.create(store)
    await catalog.ensure_loaded(CardSet.KOV)

    for _ in range(50):
        assert catalog.draw(CardSlot.HERO, CardSet.KOV, False, rng).card_set is CardSet.KOV


@pytest.mark.asyncio
async def test_draw_with_rarity_narrows_bucket(store, rng):
    catalog = await CardCatalog.create(store)
    await catalog.ensure_loaded(CardSet.KOV)

    for rarity in CardRarity:
        card = catalog.draw(CardSlot.COMMAND, CardSet.KOV, False, rng, rarity=rarity)
        assert card.rarity is rarity

    # В Зале Славы нет серебра, поэтому серебро берется из целевого сета
    card = catalog.draw(CardSlot.BASIC_CARD, CardSet.KOV, True, rng, rarity=CardRarity.SILVER)
    assert card.card_set is CardSet.KOV
    assert card.rarity is CardRarity.SILVER


@pytest.mark.asyncio
async def test_draw_without_rarity_is_uniform_over_bucket(store, rng):
    catalog = await CardCatalog.create(store)
    await catalog.ensure_loaded(CardSet.KOV)

    names = {catalog.draw(CardSlot.HERO, CardSet.KOV, False, rng).name for _ in range(60)}

    assert names == {card.name for card in catalog.bucket(CardSlot.HERO, CardSet.KOV)}


def test_draw_from_unloaded_set_returns_none(rng):
    catalog = CardCatalog(FakeStore({}))
    assert catalog.draw(CardSlot.HERO, CardSet.KOV, False, rng) is None
