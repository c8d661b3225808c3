"""Ring-LWE (TLWE) parameters, keys and samples, and extraction to plain LWE."""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from torusfhe.lwe import LweKey, LweParams, LweSample
from torusfhe.numeric import approx_phase, gaussian32, generator, to_int32
from torusfhe.polynomials import IntPolynomial, TorusPolynomial, add_mul_r, sub_mul_r


@dataclass(frozen=True)
class TLweParams:
    """Degree N, number k of mask polynomials and noise bounds of a TLWE scheme."""

    N: int
    k: int
    alpha_min: float
    alpha_max: float
    extracted_lweparams: LweParams = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "extracted_lweparams", LweParams(self.N * self.k, self.alpha_min, self.alpha_max)
        )


class TLweKey:
    """A secret TLWE key: k integer polynomials of degree N."""

    def __init__(self, params: TLweParams):
        self.params = params
        self.key = [IntPolynomial.zero(params.N) for _ in range(params.k)]

    @classmethod
    def generate(cls, params: TLweParams) -> TLweKey:
        """Draw a key with uniformly random binary coefficients."""
        result = cls(params)
        result.key = [
            IntPolynomial([generator.randint(0, 1) for _ in range(params.N)])
            for _ in range(params.k)
        ]
        return result

    def __repr__(self) -> str:
        return f"TLweKey(N={self.params.N}, k={self.params.k})"


def approx_phase_polynomial(phase: TorusPolynomial, msize: int) -> TorusPolynomial:
    """Round every coefficient of a phase to the nearest of ``msize`` messages."""
    return TorusPolynomial([approx_phase(int(c), msize) for c in phase.coefs.tolist()])


def extract_key(key: TLweKey) -> LweKey:
    """The LWE key under which samples extracted from ``key``'s samples decrypt."""
    coefs = np.concatenate([p.coefs for p in key.key]) if key.key else np.zeros(0, dtype=np.int32)
    return LweKey(key.params.extracted_lweparams, coefs.tolist())


class TLweSample:
    """A TLWE ciphertext: k mask polynomials followed by the body b = a[k]."""

    def __init__(self, params: TLweParams):
        self.params = params
        self.a = [TorusPolynomial.zero(params.N) for _ in range(params.k + 1)]
        self.current_variance = 0.0

    def __repr__(self) -> str:
        return (
            f"TLweSample(N={self.params.N}, k={self.params.k}, "
            f"variance={self.current_variance})"
        )

    @property
    def k(self) -> int:
        return self.params.k

    @property
    def b(self) -> TorusPolynomial:
        return self.a[self.params.k]

    @b.setter
    def b(self, value: TorusPolynomial) -> None:
        self._check_size(value)
        self.a[self.params.k] = value

    def _check_size(self, poly) -> None:
        if poly.n != self.params.N:
            raise ValueError(f"polynomial has size {poly.n}, expected {self.params.N}")

    def _check_compatible(self, other: TLweSample) -> None:
        if other.params.N != self.params.N or other.params.k != self.params.k:
            raise ValueError("samples have different parameters")

    @classmethod
    def encrypt_zero(cls, alpha: float, key: TLweKey) -> TLweSample:
        """A fresh encryption of the zero polynomial."""
        params = key.params
        sample = cls(params)
        body = TorusPolynomial([gaussian32(0, alpha) for _ in range(params.N)])
        for i, key_poly in enumerate(key.key):
            sample.a[i] = TorusPolynomial.uniform(params.N)
            body = add_mul_r(body, key_poly, sample.a[i])
        sample.b = body
        sample.current_variance = alpha * alpha
        return sample

    @classmethod
    def sym_encrypt(cls, message: TorusPolynomial, alpha: float, key: TLweKey) -> TLweSample:
        """Encrypt a torus polynomial."""
        sample = cls.encrypt_zero(alpha, key)
        sample._check_size(message)
        sample.b = sample.b + message
        return sample

    @classmethod
    def sym_encrypt_t(cls, message: int, alpha: float, key: TLweKey) -> TLweSample:
        """Encrypt a constant torus message."""
        sample = cls.encrypt_zero(alpha, key)
        sample.add_t_to(key.params.k, message)
        return sample

    @classmethod
    def noiseless_trivial(cls, mu: TorusPolynomial, params: TLweParams) -> TLweSample:
        """The trivial sample (0, mu)."""
        sample = cls(params)
        sample.b = mu.copy()
        return sample

    @classmethod
    def noiseless_trivial_t(cls, mu: int, params: TLweParams) -> TLweSample:
        """The trivial sample (0, mu) for a constant mu."""
        sample = cls(params)
        sample.add_t_to(params.k, mu)
        return sample

    def phase(self, key: TLweKey) -> TorusPolynomial:
        """Return b - sum(a[i] * s[i])."""
        result = self.b.copy()
        for key_poly, mask in zip(key.key, self.a[: self.params.k]):
            result = sub_mul_r(result, key_poly, mask)
        return result

    def sym_decrypt(self, key: TLweKey, msize: int) -> TorusPolynomial:
        """Decrypt to the nearest messages of a space of size ``msize``."""
        return approx_phase_polynomial(self.phase(key), msize)

    def sym_decrypt_t(self, key: TLweKey, msize: int) -> int:
        """Decrypt the constant coefficient."""
        return approx_phase(int(self.phase(key).coefs[0]), msize)

    def clear(self) -> None:
        """Set this sample to (0, 0)."""
        self.a = [TorusPolynomial.zero(self.params.N) for _ in range(self.params.k + 1)]
        self.current_variance = 0.0

    def copy(self) -> TLweSample:
        result = TLweSample(self.params)
        result.a = [p.copy() for p in self.a]
        result.current_variance = self.current_variance
        return result

    def add_to(self, other: TLweSample) -> None:
        """self += other."""
        self._check_compatible(other)
        self.a = [x + y for x, y in zip(self.a, other.a)]
        self.current_variance += other.current_variance

    def sub_to(self, other: TLweSample) -> None:
        """self -= other."""
        self._check_compatible(other)
        self.a = [x - y for x, y in zip(self.a, other.a)]
        self.current_variance += other.current_variance

    def add_mul_to(self, p: int, other: TLweSample) -> None:
        """self += p * other for an integer p."""
        self._check_compatible(other)
        self.a = [x.add_mul_z(p, y) for x, y in zip(self.a, other.a)]
        self.current_variance += to_int32(p * p) * other.current_variance

    def sub_mul_to(self, p: int, other: TLweSample) -> None:
        """self -= p * other for an integer p."""
        self._check_compatible(other)
        self.a = [x.sub_mul_z(p, y) for x, y in zip(self.a, other.a)]
        self.current_variance += to_int32(p * p) * other.current_variance

    def add_mul_r_to(self, p: IntPolynomial, other: TLweSample) -> None:
        """self += p * other for an integer polynomial p."""
        self._check_compatible(other)
        self.a = [add_mul_r(x, p, y) for x, y in zip(self.a, other.a)]
        self.current_variance += p.norm_sq2() * other.current_variance

    def mul_by_xai_minus_one(self, ai: int, other: TLweSample) -> None:
        """Set self to (X^ai - 1) * other."""
        self._check_compatible(other)
        self.a = [y.mul_by_xai_minus_one(ai) for y in other.a]

    def add_t_to(self, pos: int, x: int) -> None:
        """Add the constant x to polynomial ``pos``."""
        coefs = self.a[pos].coefs.copy()
        coefs[0] = to_int32(int(coefs[0]) + int(x))
        self.a[pos] = TorusPolynomial(coefs)

    def add_rt_to(self, pos: int, p: IntPolynomial, x: int) -> None:
        """Add p * x to polynomial ``pos``."""
        self._check_size(p)
        scaled = p.coefs * np.int32(to_int32(x))
        self.a[pos] = TorusPolynomial(self.a[pos].coefs + scaled)

    def extract_lwe_sample_index(self, index: int, params: LweParams) -> LweSample:
        """Extract the LWE sample whose phase is coefficient ``index`` of this phase."""
        n_poly, k = self.params.N, self.params.k
        if params.n != k * n_poly:
            raise ValueError(f"LWE dimension {params.n} does not match k*N = {k * n_poly}")
        if not 0 <= index < n_poly:
            raise ValueError(f"index {index} outside [0, {n_poly})")
        parts = []
        for poly in self.a[:k]:
            c = poly.coefs
            parts.append(np.concatenate((c[index::-1], -c[:index:-1])))
        result = LweSample(params)
        result.a = np.concatenate(parts).astype(np.int32) if parts else np.zeros(0, dtype=np.int32)
        result.b = int(self.b.coefs[index])
        return result

    def extract_lwe_sample(self, params: LweParams) -> LweSample:
        """Extract the LWE sample of the constant coefficient."""
        return self.extract_lwe_sample_index(0, params)