# stats.py
from collections import Counter, defaultdict


def trait_distribution(records):
    """{ trait_type: { value: count } } over all records."""
    stats = defaultdict(Counter)
    for nft in records:
        for attr in nft.attributes:
            stats[attr["trait_type"]][attr["value"]] += 1
    return {k: dict(v) for k, v in stats.items()}


def rarity_scores(records):
    """
    Statistical rarity: sum over a record's attributes of 1 / (count / total).
    Higher is rarer. Returns { record id: score }.
    """
    records = list(records)
    total = len(records)
    if not total:
        return {}
    dist = trait_distribution(records)
    scores = {}
    for nft in records:
        score = 0.0
        for attr in nft.attributes:
            count = dist[attr["trait_type"]][attr["value"]]
            score += total / count
        scores[nft.id] = round(score, 4)
    return scores
