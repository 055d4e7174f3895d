"""
Static catalog of record kinds.

The catalog is declared once, validated into frozen ``RecordKindSchema``
models at import time and exposed only through read-only accessors.
Declaration order is display order: fields within a kind and kinds within
a category are returned exactly as listed here.
"""

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

import structlog

from carelog.domain.models import Category, RecordKindSchema

logger = structlog.get_logger(__name__)

_NOTES: dict[str, Any] = {
    "id": "notes",
    "kind": "long-text",
    "label": "Notities",
    "placeholder": "Eventuele opmerkingen...",
}

_REQUIRED_NOTE: dict[str, Any] = {
    "id": "notes",
    "kind": "long-text",
    "label": "Notitie",
    "placeholder": "Typ hier uw notitie...",
    "required": True,
}

_TEMPERATURE: dict[str, Any] = {
    "id": "value",
    "kind": "number",
    "label": "Temperatuur",
    "placeholder": "36.5",
    "required": True,
    "min": 30,
    "max": 45,
    "step": 0.1,
    "unit": "°C",
}


def _options(*pairs: tuple[str, str]) -> list[dict[str, str]]:
    return [{"value": value, "label": label} for value, label in pairs]


_CATALOG: list[dict[str, Any]] = [
    # Baby
    {
        "id": "temperature",
        "label": "Temperatuur",
        "icon": "🌡️",
        "category": "baby",
        "fields": [_TEMPERATURE, _NOTES],
    },
    {
        "id": "feeding",
        "label": "Voeding",
        "icon": "🍼",
        "category": "baby",
        "fields": [
            {
                "id": "feedingType",
                "kind": "radio-group",
                "label": "Type voeding",
                "required": True,
                "options": _options(
                    ("bottle", "Fles"),
                    ("breast_left", "Linker borst"),
                    ("breast_right", "Rechter borst"),
                    ("breast_both", "Beide borsten"),
                ),
            },
            {
                "id": "amount",
                "kind": "number",
                "label": "Hoeveelheid (ml)",
                "placeholder": "120",
                "min": 1,
                "max": 500,
                "unit": "ml",
            },
            _NOTES,
        ],
    },
    {
        "id": "sleep",
        "label": "Slaap",
        "icon": "😴",
        "category": "baby",
        "fields": [
            {
                "id": "duration",
                "kind": "duration",
                "label": "Duur",
                "required": True,
                "placeholder": "Uren en minuten",
            },
            _NOTES,
        ],
    },
    {
        "id": "diaper",
        "label": "Luier",
        "icon": "👶",
        "category": "baby",
        "fields": [
            {
                "id": "diaperType",
                "kind": "radio-group",
                "label": "Type",
                "required": True,
                "options": _options(("wet", "Nat"), ("dirty", "Vies"), ("both", "Nat en vies")),
            },
            {
                "id": "diaperAmount",
                "kind": "radio-group",
                "label": "Hoeveelheid",
                "required": True,
                "options": _options(("little", "Weinig"), ("medium", "Normaal"), ("much", "Veel")),
            },
            _NOTES,
        ],
    },
    {
        "id": "weight",
        "label": "Gewicht",
        "icon": "⚖️",
        "category": "baby",
        "fields": [
            {
                "id": "weight",
                "kind": "number",
                "label": "Gewicht",
                "placeholder": "3500",
                "required": True,
                "min": 500,
                "max": 8000,
                "step": 1,
                "unit": "gram",
            },
            _NOTES,
        ],
    },
    {
        "id": "jaundice",
        "label": "Geelzucht",
        "icon": "💛",
        "category": "baby",
        "fields": [
            {
                "id": "jaundiceLevel",
                "kind": "radio-group",
                "label": "Niveau",
                "required": True,
                "options": _options(
                    ("1", "1 - Licht"),
                    ("2", "2 - Matig"),
                    ("3", "3 - Duidelijk"),
                    ("4", "4 - Ernstig"),
                    ("5", "5 - Zeer ernstig"),
                ),
            },
            _NOTES,
        ],
    },
    {
        "id": "pumping",
        "label": "Kolven",
        "icon": "🤱",
        "category": "baby",
        "fields": [
            {
                "id": "breastSide",
                "kind": "radio-group",
                "label": "Borst",
                "required": True,
                "options": _options(("left", "Links"), ("right", "Rechts"), ("both", "Beide")),
            },
            {
                "id": "amount",
                "kind": "number",
                "label": "Hoeveelheid (ml)",
                "placeholder": "80",
                "min": 1,
                "max": 500,
                "unit": "ml",
            },
            _NOTES,
        ],
    },
    {
        "id": "note",
        "label": "Notitie",
        "icon": "📝",
        "category": "baby",
        "fields": [
            {
                "id": "noteCategory",
                "kind": "radio-group",
                "label": "Categorie",
                "required": True,
                "options": _options(
                    ("general", "Algemeen"), ("question", "Vraag"), ("todo", "Te doen")
                ),
            },
            _REQUIRED_NOTE,
        ],
    },
    # Mother
    {
        "id": "mother_temperature",
        "label": "Temperatuur",
        "icon": "🌡️",
        "category": "mother",
        "record_type": "temperature",
        "fields": [_TEMPERATURE, _NOTES],
    },
    {
        "id": "blood_pressure",
        "label": "Bloeddruk",
        "icon": "💗",
        "category": "mother",
        "fields": [
            {
                "id": "systolic",
                "kind": "number",
                "label": "Systolisch",
                "placeholder": "120",
                "required": True,
                "min": 60,
                "max": 250,
                "unit": "mmHg",
            },
            {
                "id": "diastolic",
                "kind": "number",
                "label": "Diastolisch",
                "placeholder": "80",
                "required": True,
                "min": 40,
                "max": 150,
                "unit": "mmHg",
            },
            _NOTES,
        ],
    },
    {
        "id": "mood",
        "label": "Stemming",
        "icon": "😊",
        "category": "mother",
        "fields": [
            {
                "id": "mood",
                "kind": "radio-group",
                "label": "Stemming",
                "required": True,
                "options": _options(
                    ("excellent", "Uitstekend"),
                    ("good", "Goed"),
                    ("okay", "Oké"),
                    ("low", "Laag"),
                    ("very_low", "Zeer laag"),
                ),
            },
            _NOTES,
        ],
    },
    {
        "id": "pain",
        "label": "Pijn",
        "icon": "😣",
        "category": "mother",
        "fields": [
            {
                "id": "painLevel",
                "kind": "radio-group",
                "label": "Pijnniveau (1-10)",
                "required": True,
                "options": _options(
                    ("1", "1 - Geen pijn"),
                    *((str(level), str(level)) for level in range(2, 10)),
                    ("10", "10 - Ondraaglijke pijn"),
                ),
            },
            _NOTES,
        ],
    },
    {
        "id": "mother_note",
        "label": "Notitie",
        "icon": "📝",
        "category": "mother",
        "record_type": "note",
        "fields": [_REQUIRED_NOTE],
    },
]


class UnknownRecordKindError(KeyError):
    """A record kind id that is not in the catalog was requested."""


def _build(catalog: list[dict[str, Any]]) -> Mapping[str, RecordKindSchema]:
    table: dict[str, RecordKindSchema] = {}
    for entry in catalog:
        schema = RecordKindSchema.model_validate(entry)
        if schema.id in table:
            raise ValueError(f"record kind '{schema.id}' registered twice")
        table[schema.id] = schema
    return MappingProxyType(table)


_REGISTRY = _build(_CATALOG)
_BY_CATEGORY: Mapping[Category, tuple[RecordKindSchema, ...]] = MappingProxyType(
    {
        category: tuple(schema for schema in _REGISTRY.values() if schema.category is category)
        for category in Category
    }
)

logger.debug("record_kinds_registered", count=len(_REGISTRY))


def lookup(kind_id: str) -> RecordKindSchema | None:
    """Return the schema registered under ``kind_id``, or ``None``."""
    return _REGISTRY.get(kind_id)


def require(kind_id: str) -> RecordKindSchema:
    """Return the schema registered under ``kind_id``.

    Raises:
        UnknownRecordKindError: no such kind is registered.
    """
    schema = _REGISTRY.get(kind_id)
    if schema is None:
        raise UnknownRecordKindError(kind_id)
    return schema


def list_by_category(category: Category | str) -> tuple[RecordKindSchema, ...]:
    """Return the kinds of one category in registration order."""
    return _BY_CATEGORY.get(Category(category), ())


def all_kinds() -> tuple[RecordKindSchema, ...]:
    return tuple(_REGISTRY.values())
