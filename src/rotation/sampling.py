import random


def participation_weight(played_count):
    """Players with fewer completed matches are proportionally more likely."""
    return 1.0 / (played_count + 1)


def weighted_sample(candidates, k, played_counts, rng=None):
    """Draw ``k`` distinct names, one at a time, weighted by participation.

    Each draw picks from the remaining candidates by cumulative weight and
    removes the winner before the next draw. Never returns more names than
    there are candidates.
    """
    if rng is None:
        rng = random.Random()

    remaining = list(candidates)
    chosen = []
    while remaining and len(chosen) < k:
        weights = [participation_weight(played_counts.get(name, 0)) for name in remaining]
        target = rng.random() * sum(weights)
        cumulative = 0.0
        pick = len(remaining) - 1  # float rounding can leave target == total
        for i, weight in enumerate(weights):
            cumulative += weight
            if target < cumulative:
                pick = i
                break
        chosen.append(remaining.pop(pick))
    return chosen
