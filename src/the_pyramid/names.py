# (c) 2026 (KriaetvAspie / AspieTheBard)
# Licensed under the Polyform Noncommercial License 1.0.0
"""
names.py — Agent name generator.

The only contract is "returns a string label".  Names are drawn from two word
lists; duplicates get a numeric suffix so every label in a pyramid is unique.
"""

_FIRST = [
    'Ada', 'Bram', 'Cleo', 'Dex', 'Edie', 'Finn', 'Greta', 'Hugo', 'Ines',
    'Jonah', 'Kira', 'Lars', 'Mina', 'Nico', 'Opal', 'Pia', 'Quinn', 'Rosa',
    'Sven', 'Tess', 'Ugo', 'Vera', 'Wade', 'Xena', 'Yuri', 'Zola', 'Brandi',
    'Chad', 'Tiffani', 'Kyle', 'Krystal', 'Dirk', 'Summer', 'Lance', 'Misty',
]
_LAST = [
    'Abbott', 'Banks', 'Cash', 'Dollar', 'Ember', 'Frost', 'Gold', 'Hale',
    'Iverson', 'Jewel', 'Knox', 'Lux', 'Marsh', 'Nash', 'Oakes', 'Price',
    'Quill', 'Rich', 'Silver', 'Thorne', 'Upton', 'Vance', 'Wells', 'York',
    'Zane', 'Holt', 'Sterling', 'Penny', 'Steele', 'Hustle',
]


def _pick(rng, seq):
    return seq[min(len(seq) - 1, int(rng.random() * len(seq)))]


def make_name(rng, existing=None) -> str:
    """Return a "First Last" label not present in *existing*."""
    existing = existing or set()
    name = f"{_pick(rng, _FIRST)} {_pick(rng, _LAST)}"
    if name not in existing:
        return name
    i = 2
    while f"{name} {i}" in existing:
        i += 1
    return f"{name} {i}"
