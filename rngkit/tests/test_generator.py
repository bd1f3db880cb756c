"""
Generator behaviour through the public API.

Tests named ``*_no_duplicates`` are statistical: a correct generator *can*
repeat a value, but with these input sizes the chance is negligible and a
repeat almost always means bytes were consumed twice.
"""

import logging
import warnings

import pytest

from rngkit import (
    BufferCapacityWarning,
    CapacityExceeded,
    DeterminableOutput,
    EntropySkewWarning,
    Generator,
    InvalidAlphabet,
    InvalidLength,
    InvalidRange,
    RNGWarning,
)
from rngkit.constants import DEFAULT_BUFFER_SIZE, DEFAULT_CHARSET, UINT32_MAX, UINT64_MAX
from rngkit.generator import fold_length, fold_signed
from rngkit.sampler import to_float32
from rngkit.tests.fakes import CountingSource, FixedSource, le32


# ----- Integers -----------------------------------------------------------------


def test_generate_int_unbounded_covers_unsigned_domain(gen):
    for _ in range(50):
        assert 0 <= gen.generate_int() <= UINT32_MAX


def test_generate_int_maximum(gen):
    for _ in range(200):
        assert 0 <= gen.generate_int(999) <= 999


def test_generate_int_minimum_and_maximum(gen):
    for _ in range(200):
        assert 999 <= gen.generate_int(999, 9999) <= 9999


def test_generate_int_minimum_above_maximum_raises(gen):
    with pytest.raises(InvalidRange):
        gen.generate_int(9999, 999)


def test_generate_int_equal_bounds_raises(gen):
    with pytest.raises(DeterminableOutput):
        gen.generate_int(999, 999)
    with pytest.raises(DeterminableOutput):
        gen.generate_int(0)


def test_generate_int_out_of_domain_raises(gen):
    with pytest.raises(InvalidRange):
        gen.generate_int(UINT32_MAX + 1)


def test_generate_int_no_duplicates(gen):
    values = [gen.generate_int() for _ in range(1000)]
    assert len(set(values)) == len(values)


def test_generate_int_bounded_no_duplicates(gen):
    values = [gen.generate_int(999, 999999) for _ in range(9)]
    assert len(set(values)) == len(values)


def test_generate_long_ranges(gen):
    assert 0 <= gen.generate_long() <= UINT64_MAX
    for _ in range(100):
        assert 0 <= gen.generate_long(999999999999) <= 999999999999
        assert 999999999999 <= gen.generate_long(999999999999, 999999999999999) <= 999999999999999


def test_generate_long_errors(gen):
    with pytest.raises(InvalidRange):
        gen.generate_long(999999999999999, 999999999999)
    with pytest.raises(DeterminableOutput):
        gen.generate_long(999999999999, 999999999999)


def test_generate_long_no_duplicates(gen):
    values = [gen.generate_long() for _ in range(1000)]
    assert len(set(values)) == len(values)


def test_integer_arity_and_types(gen):
    with pytest.raises(TypeError):
        gen.generate_int(1, 2, 3)
    with pytest.raises(TypeError):
        gen.generate_long(True)
    with pytest.raises(TypeError):
        gen.generate_int(1.5)


def test_deterministic_source_gives_expected_die_roll(make_gen):
    g = make_gen(8, source=FixedSource(le32(0, 5)))
    assert g.generate_int(1, 6) == 1
    assert g.generate_int(1, 6) == 6


# ----- Signed folding -----------------------------------------------------------


@pytest.mark.parametrize(
    "pair, folded",
    [
        ((-10, 5), (5, 10)),
        ((5, -10), (5, 10)),
        ((-3, -7), (3, 7)),
        ((-7, -3), (3, 7)),
        ((0, -4), (0, 4)),
        ((9999, 999), (9999, 999)),
        ((1, 2), (1, 2)),
    ],
)
def test_fold_signed(pair, folded):
    assert fold_signed(*pair) == folded


def test_negative_maximum_folds_to_magnitude(gen):
    for _ in range(100):
        assert 0 <= gen.generate_int(-5) <= 5
        assert 5 <= gen.generate_long(-10, 5) <= 10


def test_folding_that_collapses_the_range_is_determinable(gen):
    with pytest.raises(DeterminableOutput):
        gen.generate_int(-1, 1)


# ----- Booleans / fractions -----------------------------------------------------


def test_generate_boolean_produces_both_values(gen):
    seen = {gen.generate_boolean() for _ in range(200)}
    assert seen == {True, False}


def test_generate_double_in_unit_interval(gen):
    for _ in range(500):
        assert 0.0 <= gen.generate_double() < 1.0


def test_generate_float_is_single_precision(gen):
    for _ in range(500):
        v = gen.generate_float()
        assert 0.0 <= v < 1.0
        assert to_float32(v) == v


# ----- Byte arrays --------------------------------------------------------------


@pytest.mark.parametrize("n", [1, 7, 999, DEFAULT_BUFFER_SIZE])
def test_generate_byte_array_length(gen, n):
    assert len(gen.generate_byte_array(n)) == n


def test_generate_byte_array_zero_is_determinable(gen):
    with pytest.raises(InvalidLength) as ei:
        gen.generate_byte_array(0)
    assert isinstance(ei.value, DeterminableOutput)


def test_generate_byte_array_negative_length_folds(gen):
    assert len(gen.generate_byte_array(-16)) == 16


def test_generate_byte_array_no_duplicates(gen):
    arrays = [gen.generate_byte_array(16) for _ in range(50)]
    assert len(set(arrays)) == len(arrays)


def test_byte_array_over_capacity_raises_without_consuming(make_gen):
    g = make_gen(64)
    g.generate_byte_array(10)
    before = g.bytes_remaining
    with pytest.raises(CapacityExceeded):
        g.generate_byte_array(65)
    assert g.bytes_remaining == before
    assert len(g.generate_byte_array(64)) == 64


def test_fold_length_type_check():
    with pytest.raises(TypeError):
        fold_length(2.0)


# ----- Strings ------------------------------------------------------------------


def test_generate_string_default_alphabet(gen):
    s = gen.generate_string(999)
    assert len(s) == 999
    assert set(s) <= set(DEFAULT_CHARSET)


def test_generate_string_custom_alphabet(gen):
    s = gen.generate_string(999, "12345678")
    assert len(s) == 999
    assert set(s) <= set("12345678")


def test_generate_string_keep_duplicates(gen):
    s = gen.generate_string(500, "aab", False)
    assert len(s) == 500
    assert set(s) == {"a", "b"}


def test_generate_string_accepts_character_lists(gen):
    s = gen.generate_string(64, ["1", "2", "3", "4", "5", "6", "7", "8"])
    assert set(s) <= set("12345678")


@pytest.mark.parametrize("charset", ["1", "111", ["1"], ["1", "1", "1"], ""])
@pytest.mark.parametrize("remove_duplicates", [True, False])
def test_generate_string_degenerate_alphabet(gen, charset, remove_duplicates):
    with pytest.raises(InvalidAlphabet):
        gen.generate_string(999, charset, remove_duplicates)


def test_generate_string_zero_length(gen):
    with pytest.raises(InvalidLength):
        gen.generate_string(0)


def test_generate_string_over_capacity(make_gen):
    g = make_gen(16)
    assert len(g.generate_string(16)) == 16
    with pytest.raises(CapacityExceeded):
        g.generate_string(17)


def test_generate_string_skew_is_advisory(gen, caplog):
    with caplog.at_level(logging.WARNING, logger="rngkit"):
        with pytest.warns(EntropySkewWarning):
            s = gen.generate_string(30, "abc")
    assert len(s) == 30
    assert any("EntropySkewWarning" in r.getMessage() for r in caplog.records)


def test_generate_string_balanced_alphabet_is_silent(gen):
    with warnings.catch_warnings():
        warnings.simplefilter("error", RNGWarning)
        gen.generate_string(30)
        gen.generate_string(30, "01")


def test_generate_string_failed_validation_consumes_nothing(make_gen):
    src = FixedSource(bytes(range(256)))
    g = make_gen(32, source=src)
    with pytest.raises(InvalidAlphabet):
        g.generate_string(8, "zz")
    assert src.fills == []


# ----- Buffer policy ------------------------------------------------------------


@pytest.mark.parametrize("size", [0, -1, -1024])
def test_non_positive_buffer_size_falls_back(make_gen, size):
    with pytest.warns(BufferCapacityWarning):
        g = make_gen(size)
    assert g.buffer_size == DEFAULT_BUFFER_SIZE
    assert 0 <= g.generate_int(10) <= 10
    assert len(g.generate_byte_array(DEFAULT_BUFFER_SIZE)) == DEFAULT_BUFFER_SIZE


def test_buffer_is_refilled_only_when_exhausted(make_gen):
    src = CountingSource()
    g = make_gen(1024, source=src)
    for _ in range(256):
        g.generate_int()
    assert src.count == 1
    assert g.bytes_remaining == 0
    g.generate_int()
    assert src.count == 2


def test_long_needs_eight_bytes(make_gen):
    g = make_gen(4)
    assert 0 <= g.generate_int() <= UINT32_MAX
    with pytest.raises(CapacityExceeded):
        g.generate_long()


# ----- Lifecycle / metrics ------------------------------------------------------


def test_context_manager_wipes_buffer(make_gen):
    with make_gen(64) as g:
        g.generate_int()
        assert g.bytes_remaining == 60
    assert g.bytes_remaining == 0
    assert 0 <= g.generate_int(5) <= 5


def test_draws_are_counted(gen, metrics, registry_value):
    gen.generate_boolean()
    gen.generate_int(3)
    gen.generate_string(4)
    assert registry_value(metrics, "rngkit_generator_draws_total", {"kind": "bool"}) == 1
    assert registry_value(metrics, "rngkit_generator_draws_total", {"kind": "int32"}) == 1
    assert registry_value(metrics, "rngkit_generator_draws_total", {"kind": "string"}) == 1


def test_generator_is_usable_with_default_arguments():
    g = Generator()
    assert g.buffer_size == DEFAULT_BUFFER_SIZE
    assert isinstance(g.generate_boolean(), bool)
    assert "Generator(buffer_size=1024" in repr(g)


def test_capacity_advisory_is_attributed_to_the_caller(metrics):
    with pytest.warns(BufferCapacityWarning) as record:
        Generator(0, metrics=metrics)
    hits = [w for w in record if issubclass(w.category, BufferCapacityWarning)]
    assert hits[0].filename == __file__
