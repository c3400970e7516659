"""
Tests for the StdRng reproduction.
"""

import pytest

from firstrank.ranking.rng import StdRng, chacha_block, pcg32_seed


class ScriptedRng(StdRng):
    """StdRng whose output words are given up front."""

    def __init__(self, words):
        super().__init__([0] * 8)
        self._words = list(words)

    def next_u32(self):
        return self._words.pop(0)


class TestChaChaBlock:
    """Tests for chacha_block."""

    def test_chacha20_zero_key_vector(self):
        # Keystream of ChaCha20 with an all-zero key and nonce
        expected = [
            0xADE0B876, 0x903DF1A0, 0xE56A5D40, 0x28BD8653,
            0xB819D2BD, 0x1AED8DA0, 0xCCEF36A8, 0xC70D778B,
            0x7C5941DA, 0x8D485751, 0x3FE02477, 0x374AD8B8,
            0xF4B8436A, 0x1CA11815, 0x69B687C3, 0x8665EEB2,
        ]
        assert chacha_block([0] * 8, rounds=20) == expected

    def test_words_are_u32(self):
        block = chacha_block(pcg32_seed(5))
        assert len(block) == 16
        assert all(0 <= w <= 0xFFFFFFFF for w in block)

    def test_rejects_short_key(self):
        with pytest.raises(ValueError):
            chacha_block([0] * 7)


class TestSeedFromU64:
    """Tests for PCG32 seed expansion and the first output words."""

    def test_pcg32_expansion_of_one(self):
        assert pcg32_seed(1) == [
            0x721DD8EA, 0x4E10265D, 0xF83B9C89, 0x2E78CE42,
            0xDA03D3BA, 0xC2D29799, 0xAC560212, 0x1BFB6673,
        ]

    def test_first_words_seed_one(self):
        rng = StdRng.seed_from_u64(1)
        assert rng.next_u32() == 0xD3301861
        assert rng.next_u32() == 0xF9681A64

    def test_first_words_seed_two(self):
        rng = StdRng.seed_from_u64(2)
        assert rng.next_u32() == 0x14C8BE1F
        assert rng.next_u32() == 0x4C1D8BB1

    def test_negative_seed_rejected(self):
        with pytest.raises(ValueError):
            StdRng.seed_from_u64(-1)

    def test_same_seed_same_stream(self):
        a = StdRng.seed_from_u64(17)
        b = StdRng.seed_from_u64(17)
        assert [a.next_u32() for _ in range(40)] == [b.next_u32() for _ in range(40)]

    def test_stream_continues_into_next_block(self):
        rng = StdRng.seed_from_u64(9)
        words = [rng.next_u32() for _ in range(17)]
        assert words[:16] == chacha_block(pcg32_seed(9), counter=0)
        assert words[16] == chacha_block(pcg32_seed(9), counter=1)[0]


class TestRandomRange:
    """Tests for widening-multiply range sampling."""

    def test_high_word_of_product(self):
        # 0xD3301861 * 7 >> 32 == 5
        assert ScriptedRng([0xD3301861]).random_range(5, 12) == 10

    def test_zero_word_gives_low(self):
        assert ScriptedRng([0]).random_range(0, 59) == 0

    def test_max_word_gives_high_minus_one(self):
        assert ScriptedRng([0xFFFFFFFF]).random_range(5, 12) == 11

    def test_biased_zone_rounds_up_on_overflow(self):
        # 1227133513 * 7 == 2**33 - 1, low half lands in the biased zone
        assert ScriptedRng([1227133513, 0xFFFFFFFF]).random_range(0, 7) == 2

    def test_biased_zone_keeps_result_without_overflow(self):
        assert ScriptedRng([1227133513, 0]).random_range(0, 7) == 1

    def test_empty_range_rejected(self):
        with pytest.raises(ValueError):
            StdRng.seed_from_u64(1).random_range(5, 5)

    def test_results_stay_in_range(self):
        rng = StdRng.seed_from_u64(3)
        for _ in range(200):
            assert 5 <= rng.random_range(5, 12) < 12
