# catalog.py
import os
import re
from dataclasses import dataclass, field

from nft_studio.errors import ConfigurationError

DEFAULT_WEIGHT = 10
WEIGHT_SEPARATOR = "#"
DNA_RESERVED_CHARS = (":", "|")
LEGENDARY_PREFIX = "LEGENDARY-"

_WEIGHTED_LABEL = re.compile(r"^(?P<name>.*)" + re.escape(WEIGHT_SEPARATOR) + r"(?P<weight>\d+)$")


def parse_label(label):
    """
    'BlueHat#5.png' -> ('BlueHat', 5)
    'Plain.png'     -> ('Plain', 10)
    The extension is dropped first, then a trailing '#<int>' becomes the weight.
    """
    stem, ext = os.path.splitext(label)
    if not ext or not ext[1:].isalnum():
        stem = label
    m = _WEIGHTED_LABEL.match(stem)
    if m:
        return m.group("name"), int(m.group("weight"))
    return stem, DEFAULT_WEIGHT


@dataclass(frozen=True)
class Trait:
    id: str
    name: str
    weight: int = DEFAULT_WEIGHT
    image: bytes = None

    @classmethod
    def from_label(cls, trait_id, label, image=None):
        name, weight = parse_label(label)
        return cls(id=trait_id, name=name, weight=weight, image=image)


@dataclass(frozen=True)
class Layer:
    id: str
    name: str
    traits: tuple = field(default_factory=tuple)

    def __post_init__(self):
        # lists are accepted for convenience but stored immutably
        object.__setattr__(self, "traits", tuple(self.traits))


def _check_id(kind, value):
    if not value:
        raise ConfigurationError(f"{kind} id must not be empty")
    for ch in DNA_RESERVED_CHARS:
        if ch in value:
            raise ConfigurationError(f"{kind} id '{value}' must not contain '{ch}'")


class TraitCatalog:
    """Ordered layers; list order is z-order, first layer drawn bottom-most."""

    def __init__(self, layers):
        self._layers = tuple(layers)

    @property
    def layers(self):
        return self._layers

    def __iter__(self):
        return iter(self._layers)

    def __len__(self):
        return len(self._layers)

    def participating_layers(self, excluded=()):
        excluded = set(excluded or ())
        return [L for L in self._layers if L.id not in excluded and L.name not in excluded]

    def validate(self, excluded=(), require_layers=True):
        seen_layers = set()
        for layer in self._layers:
            _check_id("Layer", layer.id)
            if layer.id.startswith(LEGENDARY_PREFIX):
                raise ConfigurationError(f"Layer id '{layer.id}' uses reserved prefix '{LEGENDARY_PREFIX}'")
            if layer.id in seen_layers:
                raise ConfigurationError(f"Duplicate layer id '{layer.id}'")
            seen_layers.add(layer.id)

            seen_traits = set()
            for trait in layer.traits:
                _check_id("Trait", trait.id)
                if trait.id in seen_traits:
                    raise ConfigurationError(f"Duplicate trait id '{trait.id}' in layer '{layer.name}'")
                seen_traits.add(trait.id)
                if not isinstance(trait.weight, int) or trait.weight < 1:
                    raise ConfigurationError(
                        f"Trait '{layer.name}:{trait.name}' has weight {trait.weight!r}; weights must be >= 1"
                    )

        participating = self.participating_layers(excluded)
        if require_layers and not participating:
            raise ConfigurationError("No layers participate in generation")
        for layer in participating:
            if not layer.traits:
                raise ConfigurationError(f"Layer '{layer.name}' has no traits")
        return participating


def load_catalog_dir(layers_dir, layer_order=None):
    """
    One layer per sub-directory of layers_dir, one trait per .png inside it.
    Empty layer directories are kept so validation can reject them.
    """
    if not os.path.isdir(layers_dir):
        raise ConfigurationError(f"Layers dir not found: {layers_dir}")
    available = [L for L in sorted(os.listdir(layers_dir)) if os.path.isdir(os.path.join(layers_dir, L))]
    if layer_order:
        missing = [L for L in layer_order if L not in available]
        if missing:
            raise ConfigurationError(f"Layer order names unknown layers: {', '.join(missing)}")
        available = list(layer_order)

    layers = []
    for layer_name in available:
        lp = os.path.join(layers_dir, layer_name)
        traits = []
        for f in sorted(os.listdir(lp)):
            if not f.lower().endswith(".png"):
                continue
            with open(os.path.join(lp, f), "rb") as fh:
                data = fh.read()
            traits.append(Trait.from_label(os.path.splitext(f)[0], f, image=data))
        layers.append(Layer(id=layer_name, name=layer_name, traits=traits))
    return TraitCatalog(layers)
