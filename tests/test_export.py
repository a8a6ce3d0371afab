"""Tests for writing generated collections to disk."""

import json
import random

import pytest

from nft_studio.assembler import RunState
from nft_studio.config import StudioConfig
from nft_studio.errors import ConfigurationError
from nft_studio.export import generate_to_dir, metadata_for, write_collection

from tests.conftest import BLUE, GREEN, RED, left_half_png, open_png, png_bytes


@pytest.fixture
def project(tmp_path):
    layers = tmp_path / "layers"
    (layers / "Background").mkdir(parents=True)
    (layers / "Background" / "Red#5.png").write_bytes(png_bytes(RED))
    (layers / "Background" / "Blue.png").write_bytes(png_bytes(BLUE))
    (layers / "Hat").mkdir()
    (layers / "Hat" / "Cap.png").write_bytes(left_half_png(GREEN))
    (layers / "Hat" / "Crown#1.png").write_bytes(left_half_png(BLUE))

    legends = tmp_path / "legendaries"
    legends.mkdir()
    (legends / "gold.png").write_bytes(png_bytes(GREEN))
    (legends / "gold.json").write_text(json.dumps({"name": "Gold", "description": "Shiny"}))

    return StudioConfig(
        layers_dir=str(layers),
        legendaries_dir=str(legends),
        output_dir=str(tmp_path / "out"),
        name="Cats",
        description="Meow",
        width=8,
        height=8,
        supply=3,
        seed=5,
    )


def test_generate_to_dir_writes_images_and_metadata(project, tmp_path):
    progress, logs = [], []
    result = generate_to_dir(project, progress_callback=progress.append, log_callback=logs.append)

    assert result.state is RunState.COMPLETED
    assert progress[-1] == 100
    out = tmp_path / "out"
    for i in (1, 2, 3):
        assert (out / "images" / f"{i}.png").is_file()
        assert (out / "metadata" / f"{i}.json").is_file()

    meta = json.loads((out / "metadata" / "1.json").read_text())
    assert meta["name"] == "Gold"
    assert meta["description"] == "Shiny"
    assert meta["image"] == "1.png"
    assert meta["dna"] == "LEGENDARY-gold"
    assert meta["attributes"] == [{"trait_type": "Rarity", "value": "Legendary"}]

    meta2 = json.loads((out / "metadata" / "2.json").read_text())
    assert meta2["name"] == "Cats #2"
    assert [a["trait_type"] for a in meta2["attributes"]] == ["Background", "Hat"]
    assert open_png((out / "images" / "2.png").read_bytes()).size == (8, 8)
    assert any("Saved 3" in m for m in logs)


def test_generate_to_dir_is_reproducible_with_seed(project):
    a = generate_to_dir(project)
    b = generate_to_dir(project)
    assert [r.dna for r in a.records] == [r.dna for r in b.records]


def test_generate_to_dir_layer_order(project):
    project.layer_order = ["Hat", "Background"]
    result = generate_to_dir(project, rng=random.Random(0))
    assert result.records[1].dna.startswith("Hat:")


def test_generate_to_dir_config_error_writes_nothing(project, tmp_path):
    project.supply = 0
    with pytest.raises(ConfigurationError):
        generate_to_dir(project)
    assert not (tmp_path / "out").exists()


def test_write_partial_collection(project, tmp_path):
    project.output_dir = ""
    result = generate_to_dir(project)
    assert not (tmp_path / "out").exists()
    dest = tmp_path / "partial"
    assert write_collection(result.records[:2], str(dest)) == 2
    assert sorted(p.name for p in (dest / "images").iterdir()) == ["1.png", "2.png"]


def test_metadata_for(project):
    record = generate_to_dir(project).records[2]
    meta = metadata_for(record)
    assert meta["edition"] == 3
    assert meta["image"] == "3.png"
    assert meta["dna"] == record.dna


def test_write_collection_clears_previous_run(project, tmp_path):
    result = generate_to_dir(project)
    assert len(list((tmp_path / "out" / "images").iterdir())) == 3

    logs = []
    write_collection(result.records[:1], project.output_dir, log_callback=logs.append)
    assert [p.name for p in (tmp_path / "out" / "images").iterdir()] == ["1.png"]
    assert [p.name for p in (tmp_path / "out" / "metadata").iterdir()] == ["1.json"]
    assert any("Cleared" in m for m in logs)
