"""Default parameter sets for gate bootstrapping and boolean encryption."""

from __future__ import annotations

from dataclasses import dataclass

from torusfhe.lwe import LweKey, LweParams, LweSample
from torusfhe.numeric import mod_switch_to_torus32
from torusfhe.tgsw import TGswParams
from torusfhe.tlwe import TLweParams


@dataclass(frozen=True)
class GateBootstrappingParameterSet:
    """Key-switching decomposition and the LWE/TGSW parameters of gate bootstrapping."""

    ks_t: int
    ks_basebit: int
    in_out_params: LweParams
    tgsw_params: TGswParams


_MAX_STDEV = 0.012467  # max standard deviation for a 1/4 message space


def _build(n, big_n, k, bk_l, bk_bgbit, ks_basebit, ks_length, ks_stdev, bk_stdev):
    params_in = LweParams(n, ks_stdev, _MAX_STDEV)
    params_accum = TLweParams(big_n, k, bk_stdev, _MAX_STDEV)
    params_bk = TGswParams(bk_l, bk_bgbit, params_accum)
    return GateBootstrappingParameterSet(ks_length, ks_basebit, params_in, params_bk)


def _default_80bit() -> GateBootstrappingParameterSet:
    return _build(
        n=500, big_n=1024, k=1, bk_l=2, bk_bgbit=10,
        ks_basebit=2, ks_length=8, ks_stdev=2.44e-5, bk_stdev=7.18e-9,
    )


def _default_128bit() -> GateBootstrappingParameterSet:
    return _build(
        n=630, big_n=1024, k=1, bk_l=3, bk_bgbit=7,
        ks_basebit=2, ks_length=8, ks_stdev=2.0 ** -15, bk_stdev=2.0 ** -25,
    )


def default_gate_bootstrapping_parameters(minimum_lambda: int) -> GateBootstrappingParameterSet:
    """The parameter set reaching at least ``minimum_lambda`` bits of security (80 or 128)."""
    if minimum_lambda > 128:
        raise ValueError(
            "parameters are only implemented for 80-bit and 128-bit security"
        )
    if 80 < minimum_lambda <= 128:
        return _default_128bit()
    if 0 < minimum_lambda <= 80:
        return _default_80bit()
    raise ValueError(
        "the requested security parameter must be positive (80 and 128 bits are supported)"
    )


def boots_sym_encrypt(message: int, key: LweKey) -> LweSample:
    """Encrypt a boolean as +1/8 (true) or -1/8 (false) with the key's minimal noise."""
    eighth = mod_switch_to_torus32(1, 8)
    mu = eighth if message else -eighth
    return LweSample.sym_encrypt(mu, key.params.alpha_min, key)


def boots_sym_decrypt(sample: LweSample, key: LweKey) -> int:
    """Decrypt a boolean: 1 when the phase is positive, else 0."""
    return 1 if sample.phase(key) > 0 else 0