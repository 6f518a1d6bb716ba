from p455w0rd.SpecialCharPadder import SpecialCharPadder


def test_total_variants_default_alphabet():
    # 1 + 5 + 5 + 2 * (20 + 60 + 120 + 120)
    assert SpecialCharPadder().total_variants() == 651


def test_total_variants_small_alphabet():
    assert SpecialCharPadder(alphabet="!@").total_variants() == 9
    assert SpecialCharPadder(alphabet="").total_variants() == 1


def test_pad_any_length():
    padded = SpecialCharPadder().pad("abc")
    assert len(padded) == 651
    assert padded == sorted(set(padded))
    for expected in ("abc", "!abc", "abc!", "!@abc", "@!abc", "abc%$#@!"):
        assert expected in padded


def test_pad_window_filters_lengths():
    padder = SpecialCharPadder()
    padded = padder.pad("abc", (3, 5))
    assert len(padded) == 1 + 2 * 5 + 2 * 20
    assert all(3 <= len(p) <= 5 for p in padded)
    assert padder.variant_count(3, (3, 5)) == len(padded)


def test_pad_window_excludes_base_out_of_range():
    padded = SpecialCharPadder().pad("ab", (3, 3))
    assert "ab" not in padded
    assert len(padded) == 10


def test_length_profile():
    assert SpecialCharPadder().length_profile(3, (3, 5)) == {3: 1, 4: 10, 5: 40}


def test_pad_fixed_target_gap_of_one():
    padded = SpecialCharPadder().pad("abc", 4)
    assert len(padded) == 10
    assert "!abc" in padded
    assert "abc!" in padded


def test_pad_fixed_target_only_pads_suffix_for_wider_gaps():
    padded = SpecialCharPadder().pad("abc", 5)
    assert len(padded) == 20
    assert all(p.startswith("abc") for p in padded)
    assert "abc!@" in padded
    assert "abc@!" in padded


def test_pad_fixed_target_edges():
    padder = SpecialCharPadder()
    assert padder.pad("abc", 3) == ["abc"]
    assert padder.pad("abc", 2) == []
    assert padder.pad("abc", 9) == []
    assert padder.variant_count(3, 9) == 0


def test_variant_count_matches_pad():
    padder = SpecialCharPadder(alphabet="!@#")
    for length in (None, 4, 5, 6, (2, 4), (4, 8), (10, 12)):
        assert padder.variant_count(3, length) == len(padder.pad("abc", length))


def test_lengths_are_code_points():
    # "café" is four characters (five bytes in UTF-8)
    padded = SpecialCharPadder().pad("café", (5, 5))
    assert len(padded) == 10
    assert "café!" in padded
