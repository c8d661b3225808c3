import numpy as np
import pytest

from torusfhe.numeric import mod_switch_to_torus32, set_seed, to_int32
from torusfhe.polynomials import IntPolynomial, TorusPolynomial
from torusfhe.tlwe import TLweParams, TLweSample
from torusfhe.tgsw import (
    TGswKey,
    TGswParams,
    TGswSample,
    tlwe_decomp_h,
    torus32_polynomial_decomp_h,
    torus32_polynomial_decomp_h_old,
)

ALPHA = 1e-9
MSIZE = 8


@pytest.fixture(autouse=True)
def _seed():
    set_seed([42, 7])


def make_params(n=8, k=1, l=2, bgbit=10):
    return TGswParams(l, bgbit, TLweParams(n, k, 1e-9, 0.01))


def test_params_derived_values():
    params = make_params(l=2, bgbit=10)
    assert params.Bg == 1024
    assert params.halfBg == 512
    assert params.maskMod == 1023
    assert params.kpl == 4
    assert params.h == [2 ** 22, 2 ** 12]


@pytest.mark.parametrize("l,bgbit", [(0, 10), (2, 0), (4, 10), (1, 32)])
def test_params_invalid(l, bgbit):
    with pytest.raises(ValueError):
        make_params(l=l, bgbit=bgbit)


@pytest.mark.parametrize("n", [8, 10])
@pytest.mark.parametrize("l,bgbit", [(2, 10), (3, 7), (4, 8)])
def test_decomposition_reconstructs(n, l, bgbit):
    params = make_params(n=n, l=l, bgbit=bgbit)
    poly = TorusPolynomial.uniform(n)
    before = poly.coefs.copy()
    digits = torus32_polynomial_decomp_h(poly, params)
    assert np.array_equal(poly.coefs, before)
    assert len(digits) == l
    for d in digits:
        assert d.coefs.min() >= -params.halfBg
        assert d.coefs.max() < params.halfBg
    precision = 1 << (32 - l * bgbit)
    for j, x in enumerate(poly.coefs.tolist()):
        recon = sum(int(d.coefs[j]) * h for d, h in zip(digits, params.h))
        assert 0 <= (x - recon) % (1 << 32) < precision


def test_old_decomposition_agrees():
    params = make_params(n=10, l=3, bgbit=7)
    poly = TorusPolynomial.uniform(10)
    assert torus32_polynomial_decomp_h(poly, params) == torus32_polynomial_decomp_h_old(poly, params)


def test_tlwe_decomp_h_orders_by_polynomial():
    params = make_params(k=2)
    key = TGswKey.generate(params)
    sample = TLweSample.encrypt_zero(ALPHA, key.tlwe_key)
    dec = tlwe_decomp_h(sample, params)
    assert len(dec) == params.kpl
    for i, poly in enumerate(sample.a):
        assert dec[i * params.l:(i + 1) * params.l] == torus32_polynomial_decomp_h(poly, params)


def test_key_shares_tlwe_key():
    params = make_params()
    key = TGswKey.generate(params)
    assert key.key is key.tlwe_key.key
    assert all(set(p.coefs.tolist()) <= {0, 1} for p in key.key)


def test_bloc_sample_layout_and_bounds():
    params = make_params(k=1, l=2)
    sample = TGswSample(params)
    assert sample.bloc_sample(1, 0) is sample.all_sample[2]
    with pytest.raises(IndexError):
        sample.bloc_sample(2, 0)
    with pytest.raises(IndexError):
        sample.bloc_sample(0, 2)


def test_add_h_places_gadget_on_diagonal():
    params = make_params(k=1, l=2)
    sample = TGswSample(params)
    sample.add_h()
    for bloc in range(2):
        for i in range(2):
            row = sample.bloc_sample(bloc, i)
            for pos, poly in enumerate(row.a):
                expected = np.zeros(params.tlwe_params.N, dtype=np.int32)
                if pos == bloc:
                    expected[0] = params.h[i]
                assert np.array_equal(poly.coefs, expected)


def test_add_mu_int_h_scales_gadget():
    params = make_params()
    once = TGswSample(params)
    once.add_h()
    thrice = TGswSample(params)
    thrice.add_mu_int_h(3)
    for a, b in zip(once.all_sample, thrice.all_sample):
        for pa, pb in zip(a.a, b.a):
            assert np.array_equal(pb.coefs, (pa.coefs.astype(np.int64) * 3).astype(np.int32))


def test_noiseless_trivial_and_clear():
    params = make_params()
    mu = IntPolynomial([1, 2, 0, 0, 0, 0, 0, 5])
    sample = TGswSample.noiseless_trivial(mu, params)
    for bloc in range(params.tlwe_params.k + 1):
        for i, h in enumerate(params.h):
            got = sample.bloc_sample(bloc, i).a[bloc].coefs
            assert got.tolist() == [to_int32(c * h) for c in mu.coefs.tolist()]
    sample.clear()
    assert all(not p.coefs.any() for row in sample.all_sample for p in row.a)


@pytest.mark.parametrize("n", [8, 10])
def test_sym_encrypt_decrypt_round_trip(n):
    params = make_params(n=n, l=3, bgbit=7)
    key = TGswKey.generate(params)
    message = IntPolynomial([j % MSIZE for j in range(n)])
    sample = TGswSample.sym_encrypt(message, ALPHA, key)
    assert sample.sym_decrypt(key, MSIZE) == message


def test_encrypt_int_and_bits_decrypt():
    params = make_params()
    key = TGswKey.generate(params)
    n = params.tlwe_params.N
    for m in (0, 1, 5):
        got = TGswSample.sym_encrypt_int(m, ALPHA, key).sym_decrypt(key, MSIZE)
        assert got.coefs.tolist() == [m] + [0] * (n - 1)
    for bit in (0, 1):
        got = TGswSample.encrypt_b(bit, ALPHA, key).sym_decrypt(key, MSIZE)
        assert got.coefs.tolist() == [bit] + [0] * (n - 1)


def _tlwe_message(n):
    return TorusPolynomial([mod_switch_to_torus32(j % MSIZE, MSIZE) for j in range(n)])


@pytest.mark.parametrize("n", [8, 10])
def test_extern_product_by_one_and_zero(n):
    params = make_params(n=n)
    key = TGswKey.generate(params)
    message = _tlwe_message(n)
    b = TLweSample.sym_encrypt(message, ALPHA, key.tlwe_key)
    one = TGswSample.sym_encrypt_int(1, ALPHA, key)
    assert one.extern_product(b).sym_decrypt(key.tlwe_key, MSIZE) == message
    zero = TGswSample.sym_encrypt_int(0, ALPHA, key)
    assert zero.extern_product(b).sym_decrypt(key.tlwe_key, MSIZE) == TorusPolynomial.zero(n)


def test_extern_product_by_x_rotates():
    n = 8
    params = make_params(n=n)
    key = TGswKey.generate(params)
    message = _tlwe_message(n)
    b = TLweSample.sym_encrypt(message, ALPHA, key.tlwe_key)
    x = IntPolynomial([0, 1] + [0] * (n - 2))
    gsw = TGswSample.sym_encrypt(x, ALPHA, key)
    assert gsw.extern_product(b).sym_decrypt(key.tlwe_key, MSIZE) == message.mul_by_xai(1)


def test_extern_mul_in_place_matches_product():
    params = make_params()
    key = TGswKey.generate(params)
    b = TLweSample.sym_encrypt(_tlwe_message(8), ALPHA, key.tlwe_key)
    gsw = TGswSample.sym_encrypt_int(1, ALPHA, key)
    product = gsw.extern_product(b)
    accum = b.copy()
    gsw.extern_mul_to_tlwe(accum)
    assert all(p == q for p, q in zip(accum.a, product.a))
    assert product.current_variance == pytest.approx(accum.current_variance + b.current_variance)


def test_mul_by_xai_minus_one_rowwise():
    params = make_params()
    key = TGswKey.generate(params)
    source = TGswSample.sym_encrypt_int(1, ALPHA, key)
    result = TGswSample(params)
    result.mul_by_xai_minus_one(3, source)
    for r, s in zip(result.all_sample, source.all_sample):
        for pr, ps in zip(r.a, s.a):
            assert pr == ps.mul_by_xai_minus_one(3)


def test_mul_by_xai_minus_one_rejects_other_params():
    result = TGswSample(make_params(l=2))
    other = TGswSample(make_params(l=3, bgbit=7))
    with pytest.raises(ValueError):
        result.mul_by_xai_minus_one(1, other)