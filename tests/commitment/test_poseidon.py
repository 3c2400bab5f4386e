"""
Tests for the Poseidon hash primitive.

Covers:
- Grain LFSR determinism
- Parameter generation (constant counts, Cauchy MDS shape, field range)
- Hasher caching (tables built once per width)
- Hash determinism, input sensitivity, input-count limits
"""

import pytest

from zkp.commitment.errors import EncodingError, HashPrimitiveInitError
from zkp.commitment.field import FR, CURVE_ORDER
from zkp.commitment.poseidon import (
    GrainLFSR, PoseidonParams, PoseidonHasher,
    FULL_ROUNDS, MAX_INPUTS, partial_rounds_for,
)


@pytest.fixture(scope="module")
def params_t3():
    return PoseidonParams.generate(3)


# ─────────────────────────────────────────────────────────────────────
# Grain LFSR & parameters
# ─────────────────────────────────────────────────────────────────────

class TestGrainLFSR:
    """Grain LFSR 테스트."""

    def test_same_seed_same_stream(self):
        a = GrainLFSR(1, 0, 254, 3, 8, 57)
        b = GrainLFSR(1, 0, 254, 3, 8, 57)
        assert a.random_bits(254) == b.random_bits(254)

    def test_different_width_different_stream(self):
        a = GrainLFSR(1, 0, 254, 3, 8, 57)
        b = GrainLFSR(1, 0, 254, 4, 8, 56)
        assert a.random_bits(254) != b.random_bits(254)

    def test_state_stays_80_bits(self):
        lfsr = GrainLFSR(1, 0, 254, 3, 8, 57)
        lfsr.random_bits(512)
        assert lfsr.state < 2 ** GrainLFSR.STATE_BITS

    def test_random_bits_matches_next_bit(self):
        """펼친 루프와 비트 단위 출력이 같아야 한다."""
        a = GrainLFSR(1, 0, 254, 3, 8, 57)
        b = GrainLFSR(1, 0, 254, 3, 8, 57)
        value = 0
        for _ in range(64):
            value = (value << 1) | b.next_bit()
        assert a.random_bits(64) == value

    def test_field_element_below_modulus(self):
        lfsr = GrainLFSR(1, 0, 254, 3, 8, 57)
        for _ in range(10):
            assert lfsr.field_element(254, CURVE_ORDER) < CURVE_ORDER


class TestPoseidonParams:
    """PoseidonParams.generate 테스트."""

    def test_partial_rounds_table(self):
        assert partial_rounds_for(2) == 56
        assert partial_rounds_for(3) == 57
        assert partial_rounds_for(17) == 68

    @pytest.mark.parametrize("width", [1, 18])
    def test_unsupported_width(self, width):
        with pytest.raises(ValueError):
            partial_rounds_for(width)

    def test_constant_count(self, params_t3):
        assert len(params_t3.round_constants) == (FULL_ROUNDS + 57) * 3

    def test_mds_shape(self, params_t3):
        assert len(params_t3.mds) == 3
        assert all(len(row) == 3 for row in params_t3.mds)

    def test_mds_entries_nonzero(self, params_t3):
        assert all(m != FR(0) for row in params_t3.mds for m in row)

    def test_deterministic(self, params_t3):
        again = PoseidonParams.generate(3)
        assert again.round_constants == params_t3.round_constants
        assert again.mds == params_t3.mds


# ─────────────────────────────────────────────────────────────────────
# Hasher
# ─────────────────────────────────────────────────────────────────────

class TestPoseidonHasher:
    """PoseidonHasher 테스트."""

    def test_tables_cached_per_width(self, hasher):
        first = hasher.params(3)
        assert hasher.params(3) is first
        assert 3 in hasher.built_widths

    def test_build_warms_widths(self):
        warm = PoseidonHasher.build(warm_widths=[2])
        assert warm.built_widths == [2]

    def test_build_bad_width_fails_closed(self):
        with pytest.raises(HashPrimitiveInitError):
            PoseidonHasher.build(warm_widths=[1])

    def test_hash_deterministic(self, hasher):
        assert hasher.hash([FR(1), FR(2)]) == hasher.hash([FR(1), FR(2)])

    def test_hash_in_field(self, hasher):
        assert 0 <= int(hasher.hash([FR(1), FR(2)])) < CURVE_ORDER

    def test_hash_order_sensitive(self, hasher):
        assert hasher.hash([FR(1), FR(2)]) != hasher.hash([FR(2), FR(1)])

    def test_hash_value_sensitive(self, hasher):
        assert hasher.hash([FR(1), FR(2)]) != hasher.hash([FR(1), FR(3)])

    def test_hash_length_sensitive(self, hasher):
        """[1]과 [1, 0]은 폭이 달라 다른 해시가 된다."""
        assert hasher.hash([FR(1)]) != hasher.hash([FR(1), FR(0)])

    def test_hash_accepts_ints(self, hasher):
        assert hasher.hash([1, 2]) == hasher.hash([FR(1), FR(2)])

    def test_empty_input_rejected(self, hasher):
        with pytest.raises(EncodingError):
            hasher.hash([])

    def test_too_many_inputs_rejected(self, hasher):
        with pytest.raises(EncodingError):
            hasher.hash([FR(1)] * (MAX_INPUTS + 1))

    def test_element_to_hex(self, hasher):
        h = hasher.hash([FR(1), FR(2)])
        assert int(hasher.element_to_hex(h), 16) == int(h)


# ─────────────────────────────────────────────────────────────────────
# circomlib 호환 (알려진 출력값)
# ─────────────────────────────────────────────────────────────────────

class TestCircomlibVectors:
    """circomlibjs poseidon과 같은 값이 나와야 한다 (클라이언트 호환)."""

    def test_two_inputs(self, hasher):
        h = hasher.hash([FR(1), FR(2)])
        assert hasher.element_to_hex(h) == (
            "115cc0f5e7d690413df64c6b9662e9cf2a3617f2743245519e19607a4417189a"
        )

    def test_one_input(self, hasher):
        h = hasher.hash([FR(1)])
        assert hasher.element_to_hex(h) == (
            "29176100eaa962bdc1fe6c654d6a3c130e96a4d1168b33848b897dc502820133"
        )
