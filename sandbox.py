import argparse
import asyncio
import logging
import random

from config import get_settings, rules_overrides
from database.base import make_engine, make_session_factory
from database.crud_cards import SqlCardStore
from game.booster_generator import BoosterGenerator
from game.card_catalog import CardCatalog
from game.cards import CardSet
from game.pack_system import build_rules
from game.simulation import run_simulation


def parse_args():
    parser = argparse.ArgumentParser(
        description="Сколько бустеров нужно открыть до карты из Зала Славы"
    )
    parser.add_argument("--set", dest="set_name", default=None, choices=[s.value for s in CardSet])
    parser.add_argument("--trials", type=int, default=1000)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--max-packs", type=int, default=10_000)
    return parser.parse_args()


async def main():
    args = parse_args()
    settings = get_settings()

    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    card_set = CardSet(args.set_name or settings.DEFAULT_SET)
    seed = args.seed if args.seed is not None else settings.RANDOM_SEED
    rules = build_rules(card_set, settings.BOOSTER_PRESET, **rules_overrides(settings))

    engine = make_engine(settings.DB_URL)
    try:
        catalog = await CardCatalog.create(SqlCardStore(make_session_factory(engine)))
        generator = BoosterGenerator(catalog, random.Random(seed))
        report = await run_simulation(generator, rules, args.trials, args.max_packs)
    finally:
        await engine.dispose()

    print(report.attempts)
    print(f"mean={report.mean} min={report.minimum} max={report.maximum}")


if __name__ == "__main__":
    asyncio.run(main())
