# config.py
import json
import os
from dataclasses import dataclass, field

from nft_studio.assembler import CollectionSettings
from nft_studio.compositor import DEFAULT_CANVAS_SIZE

SAVED_CONFIGS_PATH = os.path.join("configs", "saved_configs.json")


# =========================================================
# Helpers for JSON persistence
# =========================================================
def load_json(path, default):
    try:
        with open(path, "r") as f:
            return json.load(f)
    except (OSError, ValueError):
        return default


def save_json(path, data):
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    with open(path, "w") as f:
        json.dump(data, f, indent=4)


@dataclass
class StudioConfig:
    """
    Config keys:
      layers_dir, legendaries_dir, output_dir
      layer_order: [layer_name, ...]
      excluded_layers: [layer_name, ...]
      collection: { name, symbol, description }
      size: { width, height }
      supply, seed
    """

    layers_dir: str = ""
    legendaries_dir: str = ""
    output_dir: str = ""
    layer_order: list = field(default_factory=list)
    excluded_layers: list = field(default_factory=list)
    name: str = "Collection"
    symbol: str = ""
    description: str = ""
    width: int = DEFAULT_CANVAS_SIZE[0]
    height: int = DEFAULT_CANVAS_SIZE[1]
    supply: int = 10
    seed: int = None

    @classmethod
    def from_dict(cls, data):
        collection = data.get("collection", {}) or {}
        size_conf = data.get("size", {}) or {}
        seed = data.get("seed")
        return cls(
            layers_dir=data.get("layers_dir", ""),
            legendaries_dir=data.get("legendaries_dir", ""),
            output_dir=data.get("output_dir", ""),
            layer_order=list(data.get("layer_order", []) or []),
            excluded_layers=list(data.get("excluded_layers", []) or []),
            name=collection.get("name", "Collection"),
            symbol=collection.get("symbol", ""),
            description=collection.get("description", ""),
            width=int(size_conf.get("width", DEFAULT_CANVAS_SIZE[0])),
            height=int(size_conf.get("height", DEFAULT_CANVAS_SIZE[1])),
            supply=int(data.get("supply", 10)),
            seed=int(seed) if seed is not None else None,
        )

    def to_dict(self):
        return {
            "layers_dir": self.layers_dir,
            "legendaries_dir": self.legendaries_dir,
            "output_dir": self.output_dir,
            "layer_order": list(self.layer_order),
            "excluded_layers": list(self.excluded_layers),
            "collection": {"name": self.name, "symbol": self.symbol, "description": self.description},
            "size": {"width": self.width, "height": self.height},
            "supply": self.supply,
            "seed": self.seed,
        }

    def settings(self):
        return CollectionSettings(
            name=self.name,
            description=self.description,
            total_supply=self.supply,
            symbol=self.symbol,
            canvas_size=(self.width, self.height),
            excluded_layers=tuple(self.excluded_layers),
        )


def load_configs(path=SAVED_CONFIGS_PATH):
    """{ config name: StudioConfig }"""
    raw = load_json(path, {})
    return {name: StudioConfig.from_dict(data) for name, data in raw.items()}


def save_configs(configs, path=SAVED_CONFIGS_PATH):
    save_json(path, {name: cfg.to_dict() for name, cfg in configs.items()})
