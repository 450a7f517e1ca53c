import random
import threading

import pytest

from toolkit.services.random_strings import NUM_NONALPHA
from toolkit.services.random_strings import RANDOM_STRING_SOURCE
from toolkit.services.random_strings import RandomStringGenerator

NON_ALPHA = RANDOM_STRING_SOURCE[-NUM_NONALPHA:]


def test_alphabet_layout():
    assert len(RANDOM_STRING_SOURCE) == 64
    assert len(set(RANDOM_STRING_SOURCE)) == 64
    assert NON_ALPHA == "0123456789_+"


@pytest.mark.parametrize("length", [0, 1, 10, 25, 100])
def test_random_string_length_and_alphabet(length):
    s = RandomStringGenerator().random_string(length)
    assert len(s) == length
    assert set(s) <= set(RANDOM_STRING_SOURCE)


@pytest.mark.parametrize("length", [0, 1, 10, 64])
def test_random_string_with_alpha_start_length_and_alphabet(length):
    s = RandomStringGenerator().random_string_with_alpha_start(length)
    assert len(s) == length
    assert set(s) <= set(RANDOM_STRING_SOURCE)


def test_alpha_start_never_begins_with_digit_or_symbol():
    generator = RandomStringGenerator(random.Random(1234))
    for _ in range(2000):
        assert generator.random_string_with_alpha_start(3)[0] not in NON_ALPHA


@pytest.mark.parametrize("length", [-5, -1])
def test_negative_length_gives_empty_string(length):
    generator = RandomStringGenerator()
    assert generator.random_string(length) == ""
    assert generator.random_string_with_alpha_start(length) == ""


def test_injected_generator_is_reproducible():
    first = RandomStringGenerator(random.Random(42)).random_string(30)
    second = RandomStringGenerator(random.Random(42)).random_string(30)
    assert first == second


def test_shared_generator_across_threads():
    generator = RandomStringGenerator(random.Random(7))
    results: list[str] = []

    def _worker():
        for _ in range(200):
            results.append(generator.random_string(16))

    threads = [threading.Thread(target=_worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(results) == 1600
    assert all(len(s) == 16 for s in results)
