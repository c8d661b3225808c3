"""LWE parameters, keys and samples over the 32-bit torus."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

import numpy as np

from torusfhe.numeric import dtot32, gaussian32, generator, to_int32, uniform_torus32


@dataclass(frozen=True)
class LweParams:
    """Dimension and noise bounds of an LWE scheme."""

    n: int
    alpha_min: float
    alpha_max: float


def _dot(a: np.ndarray, key: np.ndarray) -> int:
    """Inner product of a mask and a key, wrapped to 32 bits."""
    products = a.astype(np.int64) * key.astype(np.int64)
    return to_int32(int(products.sum(dtype=np.int64)))


class LweKey:
    """A secret LWE key: one integer (normally a bit) per coordinate."""

    def __init__(self, params: LweParams, key: Iterable[int] | None = None):
        self.params = params
        if key is None:
            self.key = np.zeros(params.n, dtype=np.int32)
        else:
            values = np.array([to_int32(v) for v in key], dtype=np.int32)
            if len(values) != params.n:
                raise ValueError(f"key has {len(values)} coefficients, expected {params.n}")
            self.key = values

    @classmethod
    def generate(cls, params: LweParams) -> LweKey:
        """Draw a uniformly random binary key."""
        return cls(params, [generator.randint(0, 1) for _ in range(params.n)])

    def __repr__(self) -> str:
        return f"LweKey(n={self.params.n})"


class LweSample:
    """An LWE ciphertext (a, b) together with an estimate of its noise variance."""

    def __init__(self, params: LweParams):
        self.params = params
        self.a = np.zeros(params.n, dtype=np.int32)
        self.b = 0
        self.current_variance = 0.0

    def __repr__(self) -> str:
        return f"LweSample(n={self.params.n}, b={self.b}, variance={self.current_variance})"

    @classmethod
    def noiseless_trivial(cls, mu: int, params: LweParams) -> LweSample:
        """The trivial sample (0, mu)."""
        sample = cls(params)
        sample.b = to_int32(mu)
        return sample

    @classmethod
    def _encrypt(cls, b: int, alpha: float, key: LweKey) -> LweSample:
        sample = cls(key.params)
        sample.a = np.array([uniform_torus32() for _ in range(key.params.n)], dtype=np.int32)
        sample.b = to_int32(b + _dot(sample.a, key.key))
        sample.current_variance = alpha * alpha
        return sample

    @classmethod
    def sym_encrypt(cls, message: int, alpha: float, key: LweKey) -> LweSample:
        """Encrypt a torus message with Gaussian noise of standard deviation ``alpha``."""
        return cls._encrypt(gaussian32(message, alpha), alpha, key)

    @classmethod
    def sym_encrypt_with_external_noise(
        cls, message: int, noise: float, alpha: float, key: LweKey
    ) -> LweSample:
        """Encrypt a torus message with a noise value chosen by the caller."""
        return cls._encrypt(to_int32(message + dtot32(noise)), alpha, key)

    def phase(self, key: LweKey) -> int:
        """Return b - <a, s>."""
        return to_int32(self.b - _dot(self.a, key.key))

    def sub_to(self, other: LweSample) -> None:
        """Subtract another sample from this one in place."""
        if len(other.a) != len(self.a):
            raise ValueError(f"sample sizes differ: {len(self.a)} and {len(other.a)}")
        self.a = self.a - other.a
        self.b = to_int32(self.b - other.b)
        self.current_variance += other.current_variance