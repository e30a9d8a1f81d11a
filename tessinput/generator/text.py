"""Random text for generated samples.

Texts are drawn from printable ASCII (code points 33 to 126 inclusive) with a
`numpy.random.RandomState`, so any sample can be recreated from its seed.
"""

import numpy as np

PRINTABLE_MIN = 33
PRINTABLE_MAX = 126


def random_text(rng, min_length, max_length):
    """Generates a printable ASCII string.

    Args:
        rng (np.random.RandomState): The random source.
        min_length (int): The minimum number of characters.
        max_length (int): The maximum number of characters, inclusive.

    Returns:
        str: A string of between `min_length` and `max_length` characters.
    """
    length = rng.randint(min_length, max_length + 1)
    codes = rng.randint(PRINTABLE_MIN, PRINTABLE_MAX + 1, size=length)
    return "".join(chr(c) for c in codes)


def text_for_seed(seed, min_length, max_length):
    """The text of the sample generated with `seed`."""
    return random_text(np.random.RandomState(seed), min_length, max_length)
