# nft_studio
"""Generative collection engine for layered NFT art."""

from nft_studio.assembler import (
    CollectionAssembler,
    CollectionSettings,
    GeneratedNFT,
    GenerationResult,
    RunState,
    generate,
)
from nft_studio.catalog import Layer, Trait, TraitCatalog, parse_label
from nft_studio.errors import AssetLoadWarning, ConfigurationError, DnaExhaustion
from nft_studio.legendary import LegendaryItem, LegendaryTable

__all__ = [
    "AssetLoadWarning",
    "CollectionAssembler",
    "CollectionSettings",
    "ConfigurationError",
    "DnaExhaustion",
    "GeneratedNFT",
    "GenerationResult",
    "Layer",
    "LegendaryItem",
    "LegendaryTable",
    "RunState",
    "Trait",
    "TraitCatalog",
    "generate",
    "parse_label",
]
