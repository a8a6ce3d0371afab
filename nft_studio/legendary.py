# legendary.py
import json
import os
from dataclasses import dataclass, field

from nft_studio.errors import ConfigurationError

DEFAULT_LEGENDARY_ATTRIBUTES = ({"trait_type": "Rarity", "value": "Legendary"},)


@dataclass(frozen=True)
class LegendaryItem:
    id: str
    name: str = ""
    description: str = ""
    image: bytes = None
    attributes: tuple = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, "attributes", tuple(dict(a) for a in (self.attributes or ())))

    def resolved_attributes(self):
        if self.attributes:
            return tuple(dict(a) for a in self.attributes)
        return tuple(dict(a) for a in DEFAULT_LEGENDARY_ATTRIBUTES)


class LegendaryTable:
    """
    Pre-authored items bound to slots 1..K in table order.
    Editable before a run; the assembler takes a snapshot when it starts.
    """

    def __init__(self, items=None):
        self._items = list(items or [])
        ids = [it.id for it in self._items]
        if len(set(ids)) != len(ids):
            raise ConfigurationError("Duplicate legendary ids")

    @property
    def items(self):
        return tuple(self._items)

    def __len__(self):
        return len(self._items)

    def __iter__(self):
        return iter(tuple(self._items))

    def slot_count(self):
        return len(self._items)

    def item_for_slot(self, slot):
        if 1 <= slot <= len(self._items):
            return self._items[slot - 1]
        return None

    def add(self, item):
        if any(it.id == item.id for it in self._items):
            raise ConfigurationError(f"Legendary '{item.id}' already in table")
        self._items.append(item)

    def remove(self, item_id):
        before = len(self._items)
        self._items = [it for it in self._items if it.id != item_id]
        return len(self._items) != before

    def move_up(self, index):
        if index <= 0 or index >= len(self._items):
            return False
        self._items[index - 1], self._items[index] = self._items[index], self._items[index - 1]
        return True

    def move_down(self, index):
        if index < 0 or index >= len(self._items) - 1:
            return False
        self._items[index + 1], self._items[index] = self._items[index], self._items[index + 1]
        return True

    def snapshot(self):
        return LegendaryTable(self._items)


def load_legendary_dir(legendaries_dir):
    """
    One legendary per .png, in file name order.
    An optional '<stem>.json' beside the image may set name, description, attributes.
    """
    if not legendaries_dir or not os.path.isdir(legendaries_dir):
        return LegendaryTable()
    items = []
    for f in sorted(os.listdir(legendaries_dir)):
        if not f.lower().endswith(".png"):
            continue
        stem = os.path.splitext(f)[0]
        with open(os.path.join(legendaries_dir, f), "rb") as fh:
            data = fh.read()
        meta = {}
        sidecar = os.path.join(legendaries_dir, f"{stem}.json")
        if os.path.isfile(sidecar):
            try:
                with open(sidecar, "r") as fh:
                    meta = json.load(fh)
            except ValueError as e:
                raise ConfigurationError(f"Invalid legendary metadata '{sidecar}': {e}") from e
            if not isinstance(meta, dict):
                raise ConfigurationError(f"Legendary metadata '{sidecar}' must be a JSON object")
        items.append(
            LegendaryItem(
                id=stem,
                name=meta.get("name", stem),
                description=meta.get("description", ""),
                image=data,
                attributes=meta.get("attributes") or (),
            )
        )
    return LegendaryTable(items)
