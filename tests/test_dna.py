"""Tests for DNA keys and the per-run tracker."""

from nft_studio.catalog import Layer, Trait
from nft_studio.dna import DnaTracker, dna_key, legendary_dna
from nft_studio.legendary import LegendaryItem


def test_dna_key_format():
    bg, hat = Layer("bg", "Background"), Layer("hat", "Hat")
    selection = [(bg, Trait("red", "Red")), (hat, Trait("cap", "Cap"))]
    assert dna_key(selection) == "bg:red|hat:cap"


def test_legendary_dna():
    assert legendary_dna(LegendaryItem(id="gold")) == "LEGENDARY-gold"


def test_tracker_accepts_once():
    tracker = DnaTracker()
    assert "k" not in tracker
    assert tracker.try_accept("k")
    assert "k" in tracker
    assert not tracker.try_accept("k")
    assert len(tracker) == 1


def test_new_tracker_is_empty():
    first = DnaTracker()
    first.try_accept("k")
    assert DnaTracker().try_accept("k")
