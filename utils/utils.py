import random


def generate_entity_id(prefix, rng: random.Random, day=1):
    """Generate a unique entity ID from a prefix, the current day and random bits."""
    return f"{prefix}_{day}_{rng.getrandbits(40):010x}"


def clamp(value, low, high):
    """Clamp value into the closed range [low, high]."""
    return max(low, min(high, value))
