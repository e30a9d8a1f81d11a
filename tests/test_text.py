import numpy as np
import pytest

from tessinput.generator.text import PRINTABLE_MAX, PRINTABLE_MIN, random_text, text_for_seed


def test_text_for_seed_is_deterministic():
    assert text_for_seed(42, 5, 20) == text_for_seed(42, 5, 20)
    assert text_for_seed(1, 30, 30) != text_for_seed(2, 30, 30)


@pytest.mark.parametrize("seed", range(20))
def test_length_and_characters(seed):
    text = text_for_seed(seed, 3, 8)
    assert 3 <= len(text) <= 8
    assert all(PRINTABLE_MIN <= ord(c) <= PRINTABLE_MAX for c in text)
    assert " " not in text


def test_fixed_length():
    rng = np.random.RandomState(0)
    assert [len(random_text(rng, 7, 7)) for _ in range(5)] == [7] * 5


def test_bounds_are_inclusive():
    rng = np.random.RandomState(0)
    lengths = {len(random_text(rng, 1, 2)) for _ in range(200)}
    assert lengths == {1, 2}
