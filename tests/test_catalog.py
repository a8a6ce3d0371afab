"""Tests for the trait catalog and label parsing."""

import pytest

from nft_studio.catalog import Layer, Trait, TraitCatalog, load_catalog_dir, parse_label
from nft_studio.errors import ConfigurationError

from tests.conftest import RED, png_bytes


@pytest.mark.parametrize(
    "label,expected",
    [
        ("BlueHat#5.png", ("BlueHat", 5)),
        ("Plain.png", ("Plain", 10)),
        ("Plain", ("Plain", 10)),
        ("BlueHat#5", ("BlueHat", 5)),
        ("Odd#Name#2.png", ("Odd#Name", 2)),
        ("NoWeight#x.png", ("NoWeight#x", 10)),
        ("v1.2#3.png", ("v1.2", 3)),
    ],
)
def test_parse_label(label, expected):
    assert parse_label(label) == expected


def test_parse_label_is_idempotent_on_clean_name():
    name, weight = parse_label("Plain.png")
    assert parse_label(name) == (name, weight) == ("Plain", 10)


def test_trait_from_label():
    t = Trait.from_label("BlueHat#5", "BlueHat#5.png", image=b"x")
    assert (t.id, t.name, t.weight, t.image) == ("BlueHat#5", "BlueHat", 5, b"x")


def test_layer_traits_are_immutable_tuple():
    layer = Layer("bg", "Background", [Trait("a", "A")])
    assert isinstance(layer.traits, tuple)


def test_validate_returns_participating_layers(catalog):
    layers = catalog.validate()
    assert [L.id for L in layers] == ["bg", "hat"]


def test_validate_rejects_empty_layer():
    cat = TraitCatalog([Layer("bg", "Background", [Trait("a", "A")]), Layer("hat", "Hat", [])])
    with pytest.raises(ConfigurationError, match="Hat"):
        cat.validate()


def test_excluded_empty_layer_does_not_participate():
    cat = TraitCatalog([Layer("bg", "Background", [Trait("a", "A")]), Layer("hat", "Hat", [])])
    layers = cat.validate(excluded=["Hat"])
    assert [L.id for L in layers] == ["bg"]


def test_validate_requires_some_layer():
    with pytest.raises(ConfigurationError):
        TraitCatalog([]).validate()
    assert TraitCatalog([]).validate(require_layers=False) == []


@pytest.mark.parametrize(
    "layers",
    [
        [Layer("bg", "A", [Trait("a", "A")]), Layer("bg", "B", [Trait("b", "B")])],
        [Layer("bg", "A", [Trait("a", "A"), Trait("a", "A2")])],
        [Layer("bg", "A", [Trait("a", "A", weight=0)])],
        [Layer("b:g", "A", [Trait("a", "A")])],
        [Layer("bg", "A", [Trait("a|b", "A")])],
        [Layer("LEGENDARY-x", "A", [Trait("a", "A")])],
    ],
)
def test_validate_rejects_bad_catalogs(layers):
    with pytest.raises(ConfigurationError):
        TraitCatalog(layers).validate()


def test_load_catalog_dir(tmp_path):
    (tmp_path / "Background").mkdir()
    (tmp_path / "Background" / "Red#5.png").write_bytes(png_bytes(RED))
    (tmp_path / "Background" / "notes.txt").write_text("ignored")
    (tmp_path / "Hat").mkdir()
    (tmp_path / "Hat" / "Cap.png").write_bytes(png_bytes(RED))
    (tmp_path / "Empty").mkdir()

    cat = load_catalog_dir(str(tmp_path))
    assert [L.name for L in cat] == ["Background", "Empty", "Hat"]
    red = cat.layers[0].traits[0]
    assert (red.id, red.name, red.weight) == ("Red#5", "Red", 5)
    assert red.image == png_bytes(RED)
    with pytest.raises(ConfigurationError, match="Empty"):
        cat.validate()


def test_load_catalog_dir_with_order(tmp_path):
    for name in ("Background", "Hat"):
        (tmp_path / name).mkdir()
        (tmp_path / name / "X.png").write_bytes(png_bytes(RED))
    cat = load_catalog_dir(str(tmp_path), ["Hat", "Background"])
    assert [L.name for L in cat] == ["Hat", "Background"]
    with pytest.raises(ConfigurationError):
        load_catalog_dir(str(tmp_path), ["Nope"])


def test_load_catalog_dir_missing(tmp_path):
    with pytest.raises(ConfigurationError):
        load_catalog_dir(str(tmp_path / "missing"))
