import pytest

from p455w0rd.Errors import InvalidInputError
from p455w0rd.Models import CombinationConfig, WordSet


def test_word_set_dedupes_in_order():
    words = WordSet(["pass", "admin", "", "pass", "Admin"])
    assert list(words) == ["pass", "admin", "Admin"]
    assert len(words) == 3
    assert words[1] == "admin"


def test_word_set_coerce():
    words = WordSet(["a", "b"])
    assert WordSet.coerce(words) is words
    assert WordSet.coerce(["a", "b", "a"]) == words


def test_effective_max_words():
    assert CombinationConfig(max_words=0).effective_max_words(3) == 3
    assert CombinationConfig(max_words=5).effective_max_words(3) == 3
    assert CombinationConfig(max_words=2).effective_max_words(3) == 2


@pytest.mark.parametrize(
    "kwargs",
    [
        {"min_len": 10, "max_len": 5},
        {"min_len": -1},
        {"max_words": -1},
        {"chunk_size": 0},
        {"limit": -5},
        {"dedup_capacity": 0},
        {"special_chars": "!!"},
    ],
)
def test_config_validation(kwargs):
    with pytest.raises(InvalidInputError):
        CombinationConfig(**kwargs).validate()

