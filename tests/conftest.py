"""Shared pytest fixtures for nft_studio tests."""

import io
import random

import pytest
from PIL import Image

from nft_studio.assembler import CollectionSettings
from nft_studio.catalog import Layer, Trait, TraitCatalog
from nft_studio.legendary import LegendaryItem

CANVAS = (8, 8)

RED = (255, 0, 0, 255)
GREEN = (0, 255, 0, 255)
BLUE = (0, 0, 255, 255)
CLEAR = (0, 0, 0, 0)


def png_bytes(color, size=CANVAS):
    buf = io.BytesIO()
    Image.new("RGBA", size, color).save(buf, format="PNG")
    return buf.getvalue()


def left_half_png(color, size=CANVAS):
    """Opaque color on the left half, transparent on the right."""
    img = Image.new("RGBA", size, CLEAR)
    img.paste(Image.new("RGBA", (size[0] // 2, size[1]), color), (0, 0))
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def open_png(data):
    return Image.open(io.BytesIO(data)).convert("RGBA")


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def catalog():
    """Two layers with three traits each: nine combinations."""
    return TraitCatalog(
        [
            Layer(
                id="bg",
                name="Background",
                traits=[
                    Trait("red", "Red", 10, png_bytes(RED)),
                    Trait("green", "Green", 10, png_bytes(GREEN)),
                    Trait("blue", "Blue", 10, png_bytes(BLUE)),
                ],
            ),
            Layer(
                id="hat",
                name="Hat",
                traits=[
                    Trait("cap", "Cap", 10, left_half_png(RED)),
                    Trait("crown", "Crown", 10, left_half_png(GREEN)),
                    Trait("beanie", "Beanie", 10, left_half_png(BLUE)),
                ],
            ),
        ]
    )


@pytest.fixture
def single_combo_catalog():
    return TraitCatalog([Layer(id="bg", name="Background", traits=[Trait("red", "Red", 10, png_bytes(RED))])])


@pytest.fixture
def legendaries():
    return [
        LegendaryItem(id="gold", name="Golden One", image=png_bytes(GREEN)),
        LegendaryItem(
            id="ghost",
            name="",
            description="Spooky",
            image=png_bytes(BLUE),
            attributes=[{"trait_type": "Type", "value": "Ghost"}],
        ),
    ]


def make_settings(total_supply, **kw):
    kw.setdefault("name", "Test")
    kw.setdefault("description", "A test collection")
    kw.setdefault("canvas_size", CANVAS)
    return CollectionSettings(total_supply=total_supply, **kw)
