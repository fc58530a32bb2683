"""Request-scoped getters over a frozen ``CollectionRegistry``."""

from .identity import parse_record_id, record_id_of
from .resources import HasManyGetter, ResourceGetter, ResourcesGetter
from .stats import LineStatGetter, PieStatGetter

__all__ = [
    "ResourcesGetter",
    "HasManyGetter",
    "ResourceGetter",
    "PieStatGetter",
    "LineStatGetter",
    "parse_record_id",
    "record_id_of",
]
