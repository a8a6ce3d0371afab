# dna.py
from nft_studio.catalog import LEGENDARY_PREFIX

DNA_SEPARATOR = "|"


def dna_key(selection):
    """'<layerId>:<traitId>' pairs joined in catalog order."""
    return DNA_SEPARATOR.join(f"{layer.id}:{trait.id}" for layer, trait in selection)


def legendary_dna(item):
    return f"{LEGENDARY_PREFIX}{item.id}"


class DnaTracker:
    """Accepted keys for a single run."""

    def __init__(self):
        self._accepted = set()

    def __contains__(self, key):
        return key in self._accepted

    def __len__(self):
        return len(self._accepted)

    def try_accept(self, key):
        if key in self._accepted:
            return False
        self._accepted.add(key)
        return True
