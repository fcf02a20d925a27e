# database/models/__init__.py
from database.models.card import Card, CardSetRow, CardType, Rarity

__all__ = [
    'Card',
    'CardSetRow',
    'CardType',
    'Rarity',
]
