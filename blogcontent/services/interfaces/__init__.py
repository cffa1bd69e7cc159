"""Service interface contracts (ABCs)"""

from blogcontent.services.interfaces.entity_store import IEntityStore, Item, WriteCondition

__all__ = [
    'IEntityStore',
    'Item',
    'WriteCondition',
]
