"""
Random failure clock.

The uniform source is the C++SIM dual generator: a multiplicative generator
refilling a 128-entry shuffle table that is indexed by a linear congruential
generator (Maclaren-Marsaglia). ``FailureClock`` layers the exponential
time-to-failure draw on top of it.
"""

from __future__ import annotations

import math
import secrets

TWO_26 = 67108864  # 2**26
M = 100000000
B = 31415821
M1 = 10000

SERIES_SIZE = 128


class RandomStream:
    """
    Uniform random stream on (0, 1).

    Algorithm sources:
    - MGen: Mitrani 1992, private correspondence
    - LCG: Sedgewick 1983, "Algorithms", pp. 36-38
    - Shuffle: Maclaren-Marsaglia (Knuth Vol 2)
    """

    def __init__(self, mg_seed: int, lcg_seed: int) -> None:
        # MGSeed must be odd and positive
        if mg_seed < 0:
            mg_seed = -mg_seed
        if mg_seed % 2 == 0:
            mg_seed += 1
        if lcg_seed < 0:
            lcg_seed = -lcg_seed

        self._mseed = mg_seed % TWO_26
        self._lseed = lcg_seed % M
        self._series = [self._mgen() for _ in range(SERIES_SIZE)]

    def _mgen(self) -> float:
        """
        Multiplicative generator.

        Y[i+1] = Y[i] * 5^5 mod 2^26
        Period: 2^24, seed must be odd so the value never reaches zero.
        """
        self._mseed = (self._mseed * 25) % TWO_26
        self._mseed = (self._mseed * 25) % TWO_26
        self._mseed = (self._mseed * 5) % TWO_26
        return self._mseed / TWO_26

    def _uniform(self) -> float:
        """Linear congruential generator with Maclaren-Marsaglia shuffle."""
        # LCG step with overflow prevention
        p0 = self._lseed % M1
        p1 = self._lseed // M1
        q0 = B % M1
        q1 = B // M1

        self._lseed = (((((p0 * q1 + p1 * q0) % M1) * M1 + p0 * q0) % M) + 1) % M

        choose = self._lseed % SERIES_SIZE
        result = self._series[choose]
        self._series[choose] = self._mgen()

        return result

    def __call__(self) -> float:
        return self._uniform()


class FailureClock(RandomStream):
    """
    Draws whole-day intervals until the next machine failure.

    One clock is shared by every machine in a simulator, so each draw
    advances the same sequence. With ``seed=None`` the clock is seeded from
    the operating system's entropy source.
    """

    def __init__(self, seed: int | None = None) -> None:
        if seed is None:
            seed = secrets.randbits(48)
        self._seed = seed
        super().__init__(mg_seed=seed % TWO_26, lcg_seed=seed // TWO_26 + seed)

    @property
    def seed(self) -> int:
        """Seed the clock was built from."""
        return self._seed

    def exponential(self, mean: float) -> float:
        """Exponential variate with the given mean."""
        return -mean * math.log(self._uniform())

    def draw(self, mean_days: int) -> int:
        """
        Days until the next failure for an MTTF of ``mean_days``.

        Truncated toward zero and never less than one day.
        """
        if mean_days < 1:
            raise ValueError(f"mean_days must be >= 1 (got {mean_days})")
        return max(1, int(self.exponential(mean_days)))
