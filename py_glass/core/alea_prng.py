"""
Alea PRNG used for all seeded randomness in py-glass.

Based on Johannes Baagøe's Alea algorithm. String seeds make runs easy to
reproduce from the command line, and the generator is independent of
Python's and NumPy's global random state.
"""

from typing import List, MutableSequence, TypeVar

T = TypeVar("T")


def _uint32(n):
    """Convert to unsigned 32-bit integer."""
    return int(n) & 0xFFFFFFFF


class AleaPRNG:
    """
    Small, seedable generator producing floats in [0, 1).

    Seeds are strings, so a run can be reproduced from the seed it logged,
    independent of Python's and NumPy's global random state.
    """

    def __init__(self, seed):
        """Initialize with seed string or number (or an iterable of them)."""
        self.call_count = 0

        if hasattr(seed, "__iter__") and not isinstance(seed, str):
            args = list(seed)
        else:
            args = [seed]

        mash_n = 0xEFC8249D

        def mash(data):
            nonlocal mash_n
            for char in str(data):
                mash_n = mash_n + ord(char)
                h = 0.02519603282416938 * mash_n
                mash_n = _uint32(h)
                h -= mash_n
                h *= mash_n
                mash_n = _uint32(h)
                h -= mash_n
                mash_n += h * 0x100000000  # 2^32
            return _uint32(mash_n) * 2.3283064365386963e-10  # 2^-32

        self.s0 = mash(" ")
        self.s1 = mash(" ")
        self.s2 = mash(" ")
        self.c = 1

        for arg in args:
            self.s0 -= mash(arg)
            if self.s0 < 0:
                self.s0 += 1
            self.s1 -= mash(arg)
            if self.s1 < 0:
                self.s1 += 1
            self.s2 -= mash(arg)
            if self.s2 < 0:
                self.s2 += 1

    def random(self) -> float:
        """Generate next random number in [0, 1)."""
        self.call_count += 1
        t = 2091639 * self.s0 + self.c * 2.3283064365386963e-10  # 2^-32
        self.s0 = self.s1
        self.s1 = self.s2
        self.c = int(t)
        self.s2 = t - self.c
        return self.s2

    def uniform(self, low: float, high: float) -> float:
        """Random float in [low, high)."""
        return low + (high - low) * self.random()

    def randint(self, upper: int) -> int:
        """Random integer in [0, upper)."""
        return int(self.random() * upper)

    def shuffle(self, seq: MutableSequence[T]) -> None:
        """Shuffle a sequence in place (Fisher-Yates, back to front)."""
        for i in range(len(seq) - 1, 0, -1):
            j = self.randint(i + 1)
            seq[i], seq[j] = seq[j], seq[i]

    def shuffled(self, seq) -> List[T]:
        """Return a shuffled copy of ``seq``."""
        out = list(seq)
        self.shuffle(out)
        return out

    def choice(self, seq):
        """Choose a random element from a non-empty sequence."""
        if not seq:
            raise IndexError("Cannot choose from an empty sequence")
        return seq[self.randint(len(seq))]
