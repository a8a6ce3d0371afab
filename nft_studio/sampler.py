# sampler.py
import random


def weighted_choice(options, weights, rng=None):
    """
    options: list of candidates
    weights: list[int] same length, each >= 1
    Draws r in [0, total) and walks the list subtracting weights; the option
    where the remainder reaches <= 0 wins. Float drift past the end selects
    the last option.
    """
    if not options:
        raise ValueError("weighted_choice needs at least one option")
    rng = rng or random
    remaining = rng.random() * sum(weights)
    for opt, w in zip(options, weights):
        remaining -= w
        if remaining <= 0:
            return opt
    return options[-1]


def sample_layers(layers, rng=None):
    """Returns [(layer, trait), ...] in catalog order, one per layer with traits."""
    selected = []
    for layer in layers:
        if not layer.traits:
            continue
        trait = weighted_choice(layer.traits, [t.weight for t in layer.traits], rng=rng)
        selected.append((layer, trait))
    return selected
