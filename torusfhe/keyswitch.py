"""LWE key switching: re-encrypting a sample under a different LWE key."""

from __future__ import annotations

from collections.abc import Sequence

from torusfhe.lwe import LweKey, LweParams, LweSample
from torusfhe.numeric import dtot32, generator, t32tod, to_int32

_MASK32 = (1 << 32) - 1


class LweKeySwitchKey:
    """An (n x t x base) array of LWE samples.

    ``ks[i][j][k]`` encrypts ``k * s[i] / base**(j+1)`` under the output key,
    where ``s`` is the input key and ``base = 2**basebit``.
    """

    def __init__(self, n: int, t: int, basebit: int, out_params: LweParams):
        if n < 1:
            raise ValueError(f"input key size must be positive, got {n}")
        if t < 1:
            raise ValueError(f"decomposition length must be positive, got {t}")
        if basebit < 1:
            raise ValueError(f"basebit must be positive, got {basebit}")
        if 1 + basebit * t > 32:
            raise ValueError(f"basebit * t = {basebit * t} leaves no room in 32 bits")
        self.n = n
        self.t = t
        self.basebit = basebit
        self.base = 1 << basebit
        self.out_params = out_params
        self.ks = [
            [[LweSample(out_params) for _ in range(self.base)] for _ in range(t)]
            for _ in range(n)
        ]

    def __repr__(self) -> str:
        return (
            f"LweKeySwitchKey(n={self.n}, t={self.t}, basebit={self.basebit}, "
            f"out_params={self.out_params!r})"
        )

    def _unit(self, j: int) -> int:
        """The torus element 1 / base**(j+1)."""
        return to_int32(1 << (32 - (j + 1) * self.basebit))

    def _message(self, key_bit: int, h: int, j: int) -> int:
        return to_int32(to_int32(int(key_bit) * h) * self._unit(j))

    def _check_in_key(self, in_key: Sequence[int]) -> None:
        if len(in_key) != self.n:
            raise ValueError(f"input key has {len(in_key)} coefficients, expected {self.n}")

    def _check_out_key(self, out_key: LweKey) -> None:
        if out_key.params.n != self.out_params.n:
            raise ValueError(
                f"output key has dimension {out_key.params.n}, expected {self.out_params.n}"
            )

    def generate(self, in_key: LweKey, out_key: LweKey) -> None:
        """Fill the key with encryptions whose Gaussian noises are recentred to mean zero.

        The entries for digit 0 are trivial encryptions of 0; they are never used.
        """
        keybits = in_key.key.tolist()
        self._check_in_key(keybits)
        self._check_out_key(out_key)
        alpha = out_key.params.alpha_min
        size = self.n * self.t * (self.base - 1)

        noise = [generator.gauss(0.0, alpha) for _ in range(size)]
        mean = sum(noise) / size
        noise_iter = iter([x - mean for x in noise])

        for bit, rows in zip(keybits, self.ks):
            for j, row in enumerate(rows):
                row[0] = LweSample.noiseless_trivial(0, out_key.params)
                for h in range(1, self.base):
                    row[h] = LweSample.sym_encrypt_with_external_noise(
                        self._message(bit, h, j), next(noise_iter), alpha, out_key
                    )

    def generate_old(self, in_key: LweKey, out_key: LweKey) -> None:
        """Fill the key with fresh encryptions, then recentre their mean error."""
        keybits = in_key.key.tolist()
        self._check_in_key(keybits)
        self._check_out_key(out_key)
        alpha = out_key.params.alpha_min
        for bit, rows in zip(keybits, self.ks):
            for j, row in enumerate(rows):
                for h in range(self.base):
                    row[h] = LweSample.sym_encrypt(self._message(bit, h, j), alpha, out_key)
        self.renormalize(out_key, keybits)

    def renormalize(self, out_key: LweKey, in_key: Sequence[int]) -> None:
        """Subtract the average error of the nonzero-digit entries from their bodies."""
        keybits = [int(v) for v in in_key]
        self._check_in_key(keybits)
        self._check_out_key(out_key)
        error = 0
        for bit, rows in zip(keybits, self.ks):
            for j, row in enumerate(rows):
                for h in range(1, self.base):
                    error += row[h].phase(out_key) - self._message(bit, h, j)
        count = self.n * self.t * (self.base - 1)
        correction = dtot32(t32tod(to_int32(error)) / count)
        for rows in self.ks:
            for row in rows:
                for sample in row[1:]:
                    sample.b = to_int32(sample.b - correction)

    def translate(self, result: LweSample, ai: Sequence[int]) -> None:
        """Subtract from ``result`` the encryption of sum(ai[i] * s[i]), in place."""
        values = [int(v) for v in ai]
        self._check_in_key(values)
        prec_offset = 1 << (32 - (1 + self.basebit * self.t))
        mask = self.base - 1
        for a, rows in zip(values, self.ks):
            aibar = (a + prec_offset) & _MASK32
            for j, row in enumerate(rows):
                aij = (aibar >> (32 - (j + 1) * self.basebit)) & mask
                if aij:
                    result.sub_to(row[aij])

    def switch(self, sample: LweSample) -> LweSample:
        """Return ``sample`` re-encrypted under the output key."""
        result = LweSample.noiseless_trivial(sample.b, self.out_params)
        self.translate(result, sample.a.tolist())
        return result