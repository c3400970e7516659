"""
Reproduction of the bot's pseudo-random generator.

The bot draws its daily opening time with Rust's ``rand`` 0.9 ``StdRng``.
Opening times can only be reconstructed if every step below is bit-for-bit
identical to it:

- ``seed_from_u64``: the 32-byte key is eight PCG32 outputs, little-endian.
- Core: ChaCha with 12 rounds, 64-bit block counter from 0, stream id 0.
  Output words are consumed in keystream order.
- ``random_range``: widening multiply of one u32 by the range size, with a
  single extra draw when the low half lands in the biased zone.

Usage:
    from firstrank.ranking.rng import StdRng
    rng = StdRng.seed_from_u64(17)
    hour = rng.random_range(5, 12)
"""

import numpy as np

MASK32 = 0xFFFFFFFF
MASK64 = 0xFFFFFFFFFFFFFFFF

# --- PCG32 seed expansion constants ---
PCG_MULTIPLIER = 6364136223846793005
PCG_INCREMENT = 11634580027462260723

# "expand 32-byte k"
CHACHA_CONSTANTS = (0x61707865, 0x3320646E, 0x79622D32, 0x6B206574)
CHACHA_ROUNDS = 12
BLOCK_WORDS = 16

# Lane indices for the column and diagonal quarter-rounds
_COLUMNS = (
    np.array([0, 1, 2, 3]),
    np.array([4, 5, 6, 7]),
    np.array([8, 9, 10, 11]),
    np.array([12, 13, 14, 15]),
)
_DIAGONALS = (
    np.array([0, 1, 2, 3]),
    np.array([5, 6, 7, 4]),
    np.array([10, 11, 8, 9]),
    np.array([15, 12, 13, 14]),
)


def pcg32_seed(state: int, words: int = 8) -> list[int]:
    """Expand a u64 seed into `words` u32 key words the way rand_core does."""
    state &= MASK64
    out = []
    for _ in range(words):
        # Advance first, to get away from low Hamming weight inputs
        state = (state * PCG_MULTIPLIER + PCG_INCREMENT) & MASK64
        xorshifted = (((state >> 18) ^ state) >> 27) & MASK32
        rot = state >> 59
        out.append(((xorshifted >> rot) | (xorshifted << ((32 - rot) & 31))) & MASK32)
    return out


def _rotl(v: np.ndarray, n: int) -> np.ndarray:
    return (v << np.uint32(n)) | (v >> np.uint32(32 - n))


def _quarter_round(x: np.ndarray, lanes: tuple) -> None:
    """Four quarter-rounds at once, one per lane of a, b, c, d."""
    a, b, c, d = lanes
    x[a] += x[b]
    x[d] = _rotl(x[d] ^ x[a], 16)
    x[c] += x[d]
    x[b] = _rotl(x[b] ^ x[c], 12)
    x[a] += x[b]
    x[d] = _rotl(x[d] ^ x[a], 8)
    x[c] += x[d]
    x[b] = _rotl(x[b] ^ x[c], 7)


def chacha_block(key: list[int], counter: int = 0, stream: int = 0,
                 rounds: int = CHACHA_ROUNDS) -> list[int]:
    """
    Compute one 16-word ChaCha keystream block.

    Args:
        key: Eight u32 key words
        counter: 64-bit block counter
        stream: 64-bit stream id (nonce)
        rounds: Number of rounds (12 for StdRng, 20 for the reference vectors)

    Returns:
        List of 16 u32 output words
    """
    if len(key) != 8:
        raise ValueError(f"ChaCha key must be 8 words, got {len(key)}")
    if rounds % 2:
        raise ValueError(f"ChaCha rounds must be even, got {rounds}")

    state = np.array(
        [
            *CHACHA_CONSTANTS,
            *key,
            counter & MASK32, (counter >> 32) & MASK32,
            stream & MASK32, (stream >> 32) & MASK32,
        ],
        dtype=np.uint32,
    )
    x = state.copy()
    for _ in range(rounds // 2):
        _quarter_round(x, _COLUMNS)
        _quarter_round(x, _DIAGONALS)

    return [int(w) for w in x + state]


class StdRng:
    """ChaCha12 generator with rand 0.9 ``StdRng`` seeding and sampling."""

    def __init__(self, key: list[int]):
        self._key = list(key)
        self._counter = 0
        self._buffer: list[int] = []
        self._index = 0

    @classmethod
    def seed_from_u64(cls, seed: int) -> "StdRng":
        if seed < 0:
            raise ValueError(f"Seed must be an unsigned integer, got {seed}")
        return cls(pcg32_seed(seed))

    def next_u32(self) -> int:
        if self._index >= len(self._buffer):
            self._buffer = chacha_block(self._key, self._counter)
            self._counter += 1
            self._index = 0
        word = self._buffer[self._index]
        self._index += 1
        return word

    def random_range(self, low: int, high: int) -> int:
        """
        Sample uniformly from [low, high) exactly like ``rng.random_range(low..high)``.

        Raises:
            ValueError: If the range is empty or does not fit in a u32
        """
        if not 0 <= low < high <= MASK32 + 1:
            raise ValueError(f"Invalid u32 range {low}..{high}")
        span = high - low
        if span == MASK32 + 1:
            return self.next_u32()

        product = self.next_u32() * span
        result, lo_order = product >> 32, product & MASK32

        # Biased zone: one more draw decides whether to round up
        if lo_order > (-span) & MASK32:
            new_hi_order = (self.next_u32() * span) >> 32
            if lo_order + new_hi_order > MASK32:
                result += 1

        return low + result
