#database/models/card.py
from sqlalchemy import Column, Integer, Text, ForeignKey
from sqlalchemy.orm import relationship
from database.base import Base


class Rarity(Base):
    """Справочник редкостей: Бронза, Серебро, Золото"""

    __tablename__ = "rarities"

    id = Column(Integer, primary_key=True)
    name = Column(Text, unique=True, nullable=False)


class CardType(Base):
    """Справочник типов (слот в бустере): Герой, Приказ, Основная карта"""

    __tablename__ = "types"

    id = Column(Integer, primary_key=True)
    name = Column(Text, unique=True, nullable=False)


class CardSetRow(Base):
    """Справочник сетов, short_name — БАЗ, КОВ, Зал Славы"""

    __tablename__ = "sets"

    id = Column(Integer, primary_key=True)
    short_name = Column(Text, unique=True, nullable=False)


class Card(Base):
    """Карта в хранилище (таблицу заполняет парсер сайта)"""

    __tablename__ = "cards"

    id = Column(Integer, primary_key=True)
    name = Column(Text, nullable=False)
    id_in_set = Column(Integer, nullable=False)
    rarity_id = Column(Integer, ForeignKey("rarities.id"), nullable=False)
    type_id = Column(Integer, ForeignKey("types.id"), nullable=False)
    set_id = Column(Integer, ForeignKey("sets.id"), nullable=False)
    image_url = Column(Text, nullable=True)

    rarity = relationship("Rarity")
    card_type = relationship("CardType")
    card_set = relationship("CardSetRow")

    def __repr__(self):
        return f"<Card {self.name} #{self.id_in_set}>"
