import logging
import random
from datetime import datetime
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import FastAPI, HTTPException, Query, Request
from pydantic import BaseModel
from sqlalchemy import text

from config import get_settings, rules_overrides
from database.base import make_engine, make_session_factory
from database.crud_cards import SqlCardStore
from game.booster_generator import BoosterGenerator
from game.card_catalog import CardCatalog, CatalogError
from game.cards import CardSet
from game.pack_system import build_rules

settings = get_settings()

# ===== НАСТРОЙКА ЛОГГИРОВАНИЯ =====
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


# ===== СХЕМЫ ОТВЕТОВ =====
class CardOut(BaseModel):
    name: str
    position_in_set: int
    rarity: str
    slot: str
    card_set: str
    image_url: Optional[str] = None


class SlotRollOut(BaseModel):
    position: int
    slot: str
    rarity: str
    bonus: bool


class BoosterOut(BaseModel):
    card_set: str
    cards: List[CardOut]
    recipe: List[SlotRollOut]


# ===== FASTAPI ПРИЛОЖЕНИЕ =====
@asynccontextmanager
async def lifespan(app: FastAPI):
    engine = make_engine(settings.DB_URL)
    store = SqlCardStore(make_session_factory(engine))

    app.state.engine = engine
    app.state.catalog = await CardCatalog.create(store)
    app.state.generator = BoosterGenerator(
        app.state.catalog, random.Random(settings.RANDOM_SEED)
    )
    logger.info("✅ Card catalog ready")
    yield
    await engine.dispose()


app = FastAPI(title="Booster Simulator",
              description="Симулятор открытия бустеров",
              version="1.0.0",
              lifespan=lifespan
             )


def parse_set(name: str) -> CardSet:
    try:
        return CardSet(name)
    except ValueError:
        raise HTTPException(status_code=404, detail=f"Unknown set: {name}")


# ===== ЭНДПОИНТЫ =====
@app.get("/")
async def root():
    """Корневой эндпоинт"""
    return {
        "status": "online",
        "service": "Booster Simulator",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health",
        "booster": "/booster",
    }


@app.get("/health")
async def health_check(request: Request):
    """Проверка здоровья сервиса"""
    try:
        async with request.app.state.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

        return {
            "status": "healthy",
            "database": "connected",
            "loaded_sets": [s.value for s in request.app.state.catalog.loaded_sets()],
            "timestamp": datetime.now().isoformat()
        }
    except Exception as e:
        logger.error(f"❌ Health check failed: {e}")
        return {
            "status": "unhealthy",
            "database": "disconnected",
            "error": str(e),
            "timestamp": datetime.now().isoformat()
        }


@app.get("/booster", response_model=BoosterOut)
async def open_booster(request: Request, set_name: str = Query(settings.DEFAULT_SET, alias="set")):
    """Открыть один бустер"""
    card_set = parse_set(set_name)
    rules = build_rules(card_set, settings.BOOSTER_PRESET, **rules_overrides(settings))
    generator: BoosterGenerator = request.app.state.generator

    try:
        booster, recipe = await generator.generate_with_recipe(rules)
    except CatalogError as e:
        logger.error(f"❌ Booster for {card_set.value} failed: {e}")
        raise HTTPException(status_code=502, detail=str(e))

    if booster is None:
        # Пустая корзина — ожидаемая ситуация, клиент может повторить запрос
        raise HTTPException(status_code=503, detail="Booster could not be assembled, try again")

    return BoosterOut(
        card_set=card_set.value,
        cards=[CardOut(**card.to_dict()) for card in booster],
        recipe=[
            SlotRollOut(position=roll.position, slot=roll.slot.value,
                        rarity=roll.rarity.value, bonus=roll.bonus)
            for roll in recipe
        ],
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
