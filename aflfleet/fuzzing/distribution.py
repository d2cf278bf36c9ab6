"""
Distribution of options across runner slots.

Every primitive affects floor(len(slots) * fraction) slots, chosen
uniformly at random from the injected random source. Counts truncate,
so 10% of 5 runners is 0 runners.
"""

import random
from typing import Any, Iterable, List, Sequence, Set, Tuple


def share(total: int, fraction: float) -> int:
    """Number of slots a fraction of ``total`` covers, truncated."""
    if not 0.0 <= fraction <= 1.0:
        raise ValueError(f"Fraction must be within [0, 1], got {fraction}")
    return int(total * fraction)


def sample_indices(total: int, fraction: float, rng: random.Random) -> Set[int]:
    """
    Pick share(total, fraction) distinct slot indices.

    Args:
        total: Number of slots
        fraction: Portion of slots to pick
        rng: Random source

    Returns:
        Set of selected indices in range(total)
    """
    count = share(total, fraction)
    indices: Set[int] = set()
    while len(indices) < count:
        indices.add(rng.randrange(total))
    return indices


def apply_flags(
    configs: Sequence[Any],
    attr: str,
    fraction: float,
    rng: random.Random,
) -> Set[int]:
    """
    Switch a boolean field on for a random share of the slots.

    Returns:
        Indices of the slots that were switched on
    """
    return apply_args(configs, attr, True, fraction, rng)


def apply_args(
    slots: Sequence[Any],
    attr: str,
    value: Any,
    fraction: float,
    rng: random.Random,
) -> Set[int]:
    """
    Set a fixed value on a random share of the slots.

    Returns:
        Indices of the slots that received the value
    """
    indices = sample_indices(len(slots), fraction, rng)
    for index in indices:
        setattr(slots[index], attr, value)
    return indices


def apply_exclusive_args(
    slots: Sequence[Any],
    attr: str,
    choices: Iterable[Tuple[Any, float]],
    rng: random.Random,
) -> List[Set[int]]:
    """
    Hand out mutually exclusive values of one field.

    Choices are processed in order. Each takes its share of the total
    slot count from the slots whose field is still unset, so a slot
    never ends up with two values and later choices may come up short.

    Args:
        slots: Slot records
        attr: Field holding the exclusive value
        choices: (value, fraction) pairs
        rng: Random source

    Returns:
        Indices assigned for each choice, in choice order
    """
    total = len(slots)
    assigned = []
    for value, fraction in choices:
        count = share(total, fraction)
        available = [i for i in range(total) if getattr(slots[i], attr) is None]
        rng.shuffle(available)
        picked = set(available[:count])
        for index in picked:
            setattr(slots[index], attr, value)
        assigned.append(picked)
    return assigned
