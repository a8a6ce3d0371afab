# export.py
import json
import os
import random
import shutil

from nft_studio.assembler import generate
from nft_studio.catalog import load_catalog_dir
from nft_studio.legendary import load_legendary_dir
from nft_studio.logs import safe_log


def metadata_for(nft):
    # 'image' is the local file name; hosted URLs are applied after upload
    return {
        "name": nft.name,
        "description": nft.description,
        "image": f"{nft.id}.png",
        "attributes": [dict(a) for a in nft.attributes],
        "edition": nft.id,
        "dna": nft.dna,
    }


def write_collection(records, output_dir, log_callback=None):
    """
    Writes images/<id>.png and metadata/<id>.json; returns the number written.
    Both folders are emptied first so a run never mixes with an earlier one.
    """
    images_dir = os.path.join(output_dir, "images")
    metadata_dir = os.path.join(output_dir, "metadata")
    for d in (images_dir, metadata_dir):
        if os.path.isdir(d):
            shutil.rmtree(d)
            safe_log(log_callback, f"🧹 Cleared {d}")
    os.makedirs(images_dir, exist_ok=True)
    os.makedirs(metadata_dir, exist_ok=True)

    for nft in records:
        with open(os.path.join(images_dir, f"{nft.id}.png"), "wb") as f:
            f.write(nft.image)
        with open(os.path.join(metadata_dir, f"{nft.id}.json"), "w") as mf:
            json.dump(metadata_for(nft), mf, indent=4)
    safe_log(log_callback, f"💾 Saved {len(records)} items to {output_dir}")
    return len(records)


def generate_to_dir(
    config, legendaries=None, progress_callback=None, log_callback=None, should_cancel=None, rng=None
):
    """
    Loads layers and legendaries from the config's directories, runs one
    generation and writes whatever was produced to config.output_dir.
    legendaries overrides the directory scan, e.g. after reordering.
    """
    catalog = load_catalog_dir(config.layers_dir, config.layer_order or None)
    if legendaries is None:
        legendaries = load_legendary_dir(config.legendaries_dir)
    if rng is None:
        rng = random.Random(config.seed)

    result = generate(
        catalog,
        config.settings(),
        legendaries,
        on_progress=progress_callback,
        rng=rng,
        should_cancel=should_cancel,
        log_callback=log_callback,
    )
    if config.output_dir:
        write_collection(result.records, config.output_dir, log_callback=log_callback)
    return result
