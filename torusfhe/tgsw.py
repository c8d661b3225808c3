"""TGSW parameters, keys and samples: gadget matrices of TLWE samples and the external product."""

from __future__ import annotations

import numpy as np

from torusfhe.numeric import mod_switch_from_torus32, mod_switch_to_torus32, to_int32
from torusfhe.polynomials import IntPolynomial, TorusPolynomial, add_mul_r
from torusfhe.tlwe import TLweKey, TLweParams, TLweSample

_MASK32 = (1 << 32) - 1


class TGswParams:
    """Gadget decomposition parameters: l digits of Bgbit bits over a TLWE scheme."""

    def __init__(self, l: int, bgbit: int, tlwe_params: TLweParams):
        if l < 1:
            raise ValueError(f"decomposition length must be positive, got {l}")
        if not 1 <= bgbit <= 31:
            raise ValueError(f"Bgbit must lie in [1, 31], got {bgbit}")
        if l * bgbit > 32:
            raise ValueError(f"l * Bgbit = {l * bgbit} exceeds 32 bits")
        self.l = l
        self.Bgbit = bgbit
        self.Bg = 1 << bgbit
        self.halfBg = self.Bg // 2
        self.maskMod = self.Bg - 1
        self.tlwe_params = tlwe_params
        self.kpl = (tlwe_params.k + 1) * l
        # h[i] = 1 / Bg^(i+1) as a torus element
        self.h = [to_int32(1 << (32 - (i + 1) * bgbit)) for i in range(l)]
        total = sum(1 << (32 - (i + 1) * bgbit) for i in range(l)) & _MASK32
        self.offset = (total * self.halfBg) & _MASK32

    def __repr__(self) -> str:
        return f"TGswParams(l={self.l}, Bgbit={self.Bgbit}, tlwe_params={self.tlwe_params!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TGswParams):
            return NotImplemented
        return (self.l, self.Bgbit, self.tlwe_params) == (other.l, other.Bgbit, other.tlwe_params)

    def __hash__(self) -> int:
        return hash((self.l, self.Bgbit, self.tlwe_params))


class TGswKey:
    """A TGSW key, which is a TLWE key under the scheme's TLWE parameters."""

    def __init__(self, params: TGswParams):
        self.params = params
        self.tlwe_params = params.tlwe_params
        self.tlwe_key = TLweKey(params.tlwe_params)

    @classmethod
    def generate(cls, params: TGswParams) -> TGswKey:
        """Draw a key with uniformly random binary coefficients."""
        result = cls(params)
        result.tlwe_key = TLweKey.generate(params.tlwe_params)
        return result

    @property
    def key(self) -> list[IntPolynomial]:
        return self.tlwe_key.key

    def __repr__(self) -> str:
        return f"TGswKey({self.params!r})"


def torus32_polynomial_decomp_h(sample: TorusPolynomial, params: TGswParams) -> list[IntPolynomial]:
    """Decompose a torus polynomial into l integer polynomials with digits in [-Bg/2, Bg/2)."""
    buf = sample.coefs.view(np.uint32).astype(np.int64)
    buf = (buf + params.offset) & _MASK32
    result = []
    for p in range(params.l):
        decal = 32 - (p + 1) * params.Bgbit
        digits = ((buf >> decal) & params.maskMod) - params.halfBg
        result.append(IntPolynomial(digits))
    return result


def torus32_polynomial_decomp_h_old(sample: TorusPolynomial, params: TGswParams) -> list[IntPolynomial]:
    """Coefficient-by-coefficient form of the gadget decomposition."""
    digits: list[list[int]] = [[] for _ in range(params.l)]
    for coef in sample.coefs.tolist():
        temp0 = (coef + params.offset) & _MASK32
        for p, out in enumerate(digits):
            temp1 = (temp0 >> (32 - (p + 1) * params.Bgbit)) & params.maskMod
            out.append(temp1 - params.halfBg)
    return [IntPolynomial(d) for d in digits]


def tlwe_decomp_h(sample: TLweSample, params: TGswParams) -> list[IntPolynomial]:
    """Decompose all k+1 polynomials of a TLWE sample, giving kpl integer polynomials."""
    result: list[IntPolynomial] = []
    for poly in sample.a[: params.tlwe_params.k + 1]:
        result.extend(torus32_polynomial_decomp_h(poly, params))
    return result


class TGswSample:
    """A TGSW ciphertext: (k+1) blocks of l TLWE samples."""

    def __init__(self, params: TGswParams):
        self.params = params
        self.k = params.tlwe_params.k
        self.l = params.l
        self.all_sample = [TLweSample(params.tlwe_params) for _ in range(params.kpl)]

    def __repr__(self) -> str:
        return f"TGswSample({self.params!r})"

    def bloc_sample(self, bloc: int, i: int) -> TLweSample:
        """Row ``i`` of block ``bloc``."""
        if not 0 <= bloc <= self.k:
            raise IndexError(f"block {bloc} outside [0, {self.k}]")
        if not 0 <= i < self.l:
            raise IndexError(f"row {i} outside [0, {self.l})")
        return self.all_sample[bloc * self.l + i]

    def _rows(self):
        for bloc in range(self.k + 1):
            for i in range(self.l):
                yield bloc, i, self.bloc_sample(bloc, i)

    def _check_compatible(self, other: TGswSample) -> None:
        if other.params != self.params:
            raise ValueError("samples have different parameters")

    def clear(self) -> None:
        """Set every row to (0, 0)."""
        for sample in self.all_sample:
            sample.clear()

    def add_h(self) -> None:
        """self += H."""
        for bloc, i, sample in self._rows():
            sample.add_t_to(bloc, self.params.h[i])

    def add_mu_h(self, message: IntPolynomial) -> None:
        """self += message * H for an integer polynomial message."""
        for bloc, i, sample in self._rows():
            sample.add_rt_to(bloc, message, self.params.h[i])

    def add_mu_int_h(self, message: int) -> None:
        """self += message * H for an integer message."""
        for bloc, i, sample in self._rows():
            sample.add_t_to(bloc, to_int32(message * self.params.h[i]))

    @classmethod
    def encrypt_zero(cls, alpha: float, key: TGswKey) -> TGswSample:
        """A fresh encryption of zero: every row encrypts 0."""
        result = cls(key.params)
        result.all_sample = [
            TLweSample.encrypt_zero(alpha, key.tlwe_key) for _ in range(key.params.kpl)
        ]
        return result

    @classmethod
    def sym_encrypt(cls, message: IntPolynomial, alpha: float, key: TGswKey) -> TGswSample:
        """Encrypt an integer polynomial."""
        result = cls.encrypt_zero(alpha, key)
        result.add_mu_h(message)
        return result

    @classmethod
    def sym_encrypt_int(cls, message: int, alpha: float, key: TGswKey) -> TGswSample:
        """Encrypt a constant integer."""
        result = cls.encrypt_zero(alpha, key)
        result.add_mu_int_h(message)
        return result

    @classmethod
    def encrypt_b(cls, message: int, alpha: float, key: TGswKey) -> TGswSample:
        """Encrypt a bit: H is added only when ``message`` is 1."""
        result = cls.encrypt_zero(alpha, key)
        if message == 1:
            result.add_h()
        return result

    @classmethod
    def noiseless_trivial(cls, mu: IntPolynomial, params: TGswParams) -> TGswSample:
        """The trivial sample mu * H."""
        result = cls(params)
        result.add_mu_h(mu)
        return result

    def mul_by_xai_minus_one(self, ai: int, other: TGswSample) -> None:
        """Set self to (X^ai - 1) * other."""
        self._check_compatible(other)
        for mine, theirs in zip(self.all_sample, other.all_sample):
            mine.mul_by_xai_minus_one(ai, theirs)

    def extern_mul_to_tlwe(self, accum: TLweSample) -> None:
        """Replace ``accum`` in place by the external product self * accum."""
        dec = tlwe_decomp_h(accum, self.params)
        accum.clear()
        for d, row in zip(dec, self.all_sample):
            accum.add_mul_r_to(d, row)

    def extern_product(self, b: TLweSample) -> TLweSample:
        """Return the external product self * b."""
        dec = tlwe_decomp_h(b, self.params)
        result = TLweSample(self.params.tlwe_params)
        for d, row in zip(dec, self.all_sample):
            result.add_mul_r_to(d, row)
        result.current_variance += b.current_variance
        return result

    def sym_decrypt(self, key: TGswKey, msize: int) -> IntPolynomial:
        """Decrypt to an integer polynomial with coefficients modulo ``msize``."""
        n = self.params.tlwe_params.N
        indic = np.zeros(n, dtype=np.int64)
        indic[0] = mod_switch_to_torus32(1, msize)
        decomp = torus32_polynomial_decomp_h(TorusPolynomial(indic), self.params)
        acc = TorusPolynomial.zero(n)
        for i, digits in enumerate(decomp):
            tmp = self.bloc_sample(self.k, i).phase(key.tlwe_key)
            acc = add_mul_r(acc, digits, tmp)
        return IntPolynomial([mod_switch_from_torus32(c, msize) for c in acc.coefs.tolist()])