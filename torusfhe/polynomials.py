"""Integer and torus polynomials modulo X^N + 1 with 32-bit wrapping coefficients."""

from __future__ import annotations

from collections.abc import Iterable

import numpy as np

from torusfhe.numeric import t32tod, to_int32, uniform_torus32

_INT32 = np.int32


def _as_int32(values: Iterable[int]) -> np.ndarray:
    arr = np.asarray(values)
    if arr.ndim != 1:
        raise ValueError("polynomial coefficients must form a one-dimensional sequence")
    if arr.size == 0:
        return np.zeros(0, dtype=_INT32)
    if arr.dtype == _INT32:
        return arr.copy()
    if arr.dtype == object:
        return np.array([to_int32(v) for v in arr], dtype=_INT32)
    if arr.dtype.kind not in "iub":
        raise TypeError(f"polynomial coefficients must be integers, got {arr.dtype}")
    return arr.astype(np.int64).astype(_INT32)


def _check_same_size(a: np.ndarray, b: np.ndarray) -> None:
    if len(a) != len(b):
        raise ValueError(f"polynomial sizes differ: {len(a)} and {len(b)}")


def _check_exponent(a: int, n: int) -> None:
    if not 0 <= a < 2 * n:
        raise ValueError(f"exponent {a} outside [0, {2 * n})")


def _shift(src: np.ndarray, a: int) -> np.ndarray:
    """Return the coefficients of X^a * src modulo X^N + 1, for 0 <= a < 2N."""
    n = len(src)
    if a < n:
        return np.concatenate((-src[n - a:], src[: n - a]))
    aa = a - n
    return np.concatenate((src[n - aa:], -src[: n - aa]))


class IntPolynomial:
    """Polynomial with signed 32-bit integer coefficients modulo X^N + 1."""

    __hash__ = None

    def __init__(self, coefs: Iterable[int]):
        self.coefs = _as_int32(coefs)

    @classmethod
    def zero(cls, n: int) -> IntPolynomial:
        return cls(np.zeros(n, dtype=_INT32))

    @property
    def n(self) -> int:
        return len(self.coefs)

    def __len__(self) -> int:
        return len(self.coefs)

    def __repr__(self) -> str:
        return f"IntPolynomial({self.coefs.tolist()!r})"

    def copy(self) -> IntPolynomial:
        return IntPolynomial(self.coefs)

    def __add__(self, other: IntPolynomial) -> IntPolynomial:
        if not isinstance(other, IntPolynomial):
            return NotImplemented
        _check_same_size(self.coefs, other.coefs)
        return IntPolynomial(self.coefs + other.coefs)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, IntPolynomial):
            return NotImplemented
        return np.array_equal(self.coefs, other.coefs)

    def mul_by_xai_minus_one(self, a: int) -> IntPolynomial:
        """Return (X^a - 1) * self, for 0 <= a < 2N."""
        _check_exponent(a, self.n)
        return IntPolynomial(_shift(self.coefs, a) - self.coefs)

    def norm_sq2(self) -> float:
        """Sum of squared coefficients, computed with 32-bit wrapping."""
        squares = self.coefs * self.coefs
        return float(to_int32(int(squares.astype(np.int64).sum())))

    def norm2sq(self) -> float:
        """Sum of squared coefficients, computed in floating point."""
        return sum(float(c) * float(c) for c in self.coefs.tolist())

    def norm_infty_dist(self, other: IntPolynomial) -> float:
        """Largest absolute coefficient of self - other."""
        _check_same_size(self.coefs, other.coefs)
        diff = (self.coefs - other.coefs).astype(np.int64)
        return float(np.abs(diff).max(initial=0))


class TorusPolynomial:
    """Polynomial with torus (signed 32-bit) coefficients modulo X^N + 1."""

    __hash__ = None

    def __init__(self, coefs: Iterable[int]):
        self.coefs = _as_int32(coefs)

    @classmethod
    def zero(cls, n: int) -> TorusPolynomial:
        return cls(np.zeros(n, dtype=_INT32))

    @classmethod
    def uniform(cls, n: int) -> TorusPolynomial:
        """A polynomial with uniformly random torus coefficients."""
        return cls(np.array([uniform_torus32() for _ in range(n)], dtype=np.int64))

    @property
    def n(self) -> int:
        return len(self.coefs)

    def __len__(self) -> int:
        return len(self.coefs)

    def __repr__(self) -> str:
        return f"TorusPolynomial({self.coefs.tolist()!r})"

    def copy(self) -> TorusPolynomial:
        return TorusPolynomial(self.coefs)

    def __add__(self, other: TorusPolynomial) -> TorusPolynomial:
        if not isinstance(other, TorusPolynomial):
            return NotImplemented
        _check_same_size(self.coefs, other.coefs)
        return TorusPolynomial(self.coefs + other.coefs)

    def __sub__(self, other: TorusPolynomial) -> TorusPolynomial:
        if not isinstance(other, TorusPolynomial):
            return NotImplemented
        _check_same_size(self.coefs, other.coefs)
        return TorusPolynomial(self.coefs - other.coefs)

    def __neg__(self) -> TorusPolynomial:
        return TorusPolynomial(-self.coefs)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TorusPolynomial):
            return NotImplemented
        return np.array_equal(self.coefs, other.coefs)

    def add_mul_z(self, p: int, other: TorusPolynomial) -> TorusPolynomial:
        """Return self + p * other for an integer p."""
        _check_same_size(self.coefs, other.coefs)
        return TorusPolynomial(self.coefs + _INT32(to_int32(p)) * other.coefs)

    def sub_mul_z(self, p: int, other: TorusPolynomial) -> TorusPolynomial:
        """Return self - p * other for an integer p."""
        _check_same_size(self.coefs, other.coefs)
        return TorusPolynomial(self.coefs - _INT32(to_int32(p)) * other.coefs)

    def mul_by_xai(self, a: int) -> TorusPolynomial:
        """Return X^a * self, for 0 <= a < 2N."""
        _check_exponent(a, self.n)
        return TorusPolynomial(_shift(self.coefs, a))

    def mul_by_xai_minus_one(self, a: int) -> TorusPolynomial:
        """Return (X^a - 1) * self, for 0 <= a < 2N."""
        _check_exponent(a, self.n)
        return TorusPolynomial(_shift(self.coefs, a) - self.coefs)

    def norm_infty_dist(self, other: TorusPolynomial) -> float:
        """Largest distance on the torus between matching coefficients."""
        _check_same_size(self.coefs, other.coefs)
        diff = self.coefs - other.coefs
        return max((abs(t32tod(int(d))) for d in diff.tolist()), default=0.0)


def mult_naive(poly1: IntPolynomial, poly2: TorusPolynomial) -> TorusPolynomial:
    """Product of an integer and a torus polynomial, computed term by term."""
    _check_same_size(poly1.coefs, poly2.coefs)
    acc = np.zeros(poly1.n, dtype=_INT32)
    for j, aj in enumerate(poly1.coefs):
        if aj:
            acc += aj * _shift(poly2.coefs, j)
    return TorusPolynomial(acc)


def _plain_product(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    n = len(a)
    result = np.zeros(max(2 * n - 1, 0), dtype=_INT32)
    for j, aj in enumerate(a):
        if aj:
            result[j:j + n] += aj * b
    return result


def _karatsuba(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Full (non-reduced) product of two coefficient arrays of power-of-two size."""
    size = len(a)
    h = size // 2
    if h <= 4:
        return _plain_product(a, b)
    low = _karatsuba(a[:h], b[:h])
    high = _karatsuba(a[h:], b[h:])
    mid = _karatsuba(a[:h] + a[h:], b[:h] + b[h:])
    mid -= low
    mid -= high
    result = np.zeros(2 * size - 1, dtype=_INT32)
    result[: 2 * h - 1] = low
    result[size:] = high
    result[h:h + 2 * h - 1] += mid
    return result


def _is_power_of_two(n: int) -> bool:
    return n > 0 and n & (n - 1) == 0


def mult_karatsuba(poly1: IntPolynomial, poly2: TorusPolynomial) -> TorusPolynomial:
    """Product of an integer and a torus polynomial by Karatsuba; N must be a power of 2."""
    _check_same_size(poly1.coefs, poly2.coefs)
    n = poly1.n
    if not _is_power_of_two(n):
        raise ValueError(f"Karatsuba multiplication needs a power-of-two size, got {n}")
    full = _karatsuba(poly1.coefs, poly2.coefs)
    out = np.empty(n, dtype=_INT32)
    out[: n - 1] = full[: n - 1] - full[n:]
    out[n - 1] = full[n - 1]
    return TorusPolynomial(out)


def _multiply(poly1: IntPolynomial, poly2: TorusPolynomial) -> TorusPolynomial:
    if _is_power_of_two(poly1.n):
        return mult_karatsuba(poly1, poly2)
    return mult_naive(poly1, poly2)


def add_mul_r(result: TorusPolynomial, poly1: IntPolynomial, poly2: TorusPolynomial) -> TorusPolynomial:
    """Return result + poly1 * poly2."""
    return result + _multiply(poly1, poly2)


def sub_mul_r(result: TorusPolynomial, poly1: IntPolynomial, poly2: TorusPolynomial) -> TorusPolynomial:
    """Return result - poly1 * poly2."""
    return result - _multiply(poly1, poly2)