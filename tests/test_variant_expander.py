"""Tests for the per-word leet and case expansion."""

from p455w0rd.Models import LeetMode
from p455w0rd.VariantExpander import MAX_LEET_POSITIONS, VariantExpander


def test_expand_no_leetable_chars_gives_three_case_forms():
    assert VariantExpander().expand("xyz") == ["XYZ", "Xyz", "xyz"]


def test_expand_admin():
    variants = VariantExpander().expand("admin")
    assert len(variants) <= 12
    assert len(variants) == len(set(variants))
    assert variants == sorted(variants)
    for expected in ("admin", "Admin", "ADMIN", "4dmin", "4Dmin", "adm1n", "4DM1N"):
        assert expected in variants


def test_expand_capitalizes_first_letter_after_digits():
    variants = VariantExpander().expand("admin")
    assert "4Dm1n" in variants
    assert "4dm1n" in variants


def test_expand_is_case_insensitive_on_input():
    expander = VariantExpander()
    assert expander.expand("ADMIN") == expander.expand("admin")
    assert expander.expand("AdMiN") == expander.expand("admin")


def test_expand_collapses_identical_case_forms():
    # "p455" has no letters after the first, so Capitalized == UPPERCASE
    variants = VariantExpander().expand("pass")
    assert "P455" in variants
    assert len(variants) == 23


def test_expand_never_empty():
    expander = VariantExpander()
    assert expander.expand("123") == ["123"]
    assert expander.expand("") == [""]


def test_quick_mode_substitutes_one_position_at_a_time():
    variants = VariantExpander(mode=LeetMode.QUICK).expand("password")
    assert "p4ssword" in variants
    assert "passw0rd" in variants
    assert "p4ssw0rd" not in variants
    assert len(variants) == 15


def test_full_mode_falls_back_to_quick_for_long_words():
    word = "a" * (MAX_LEET_POSITIONS + 1)
    expander = VariantExpander()
    assert expander.is_quick(word)
    # unsubstituted word + one substitution per position, three case forms each
    assert len(expander.expand(word)) == (MAX_LEET_POSITIONS + 2) * 3


def test_leet_positions():
    assert VariantExpander.leet_positions("Hello") == [1, 2, 3, 4]
    assert VariantExpander.leet_positions("xyz") == []


def test_expand_all_keeps_word_order():
    expander = VariantExpander(workers=2)
    words = ["xyz", "admin", "pass"]
    assert expander.expand_all(words) == [expander.expand(w) for w in words]


def test_expand_unicode():
    variants = VariantExpander().expand("café")
    assert "CAFÉ" in variants
    assert "c4fé" in variants
