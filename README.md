# torusfhe

Building blocks for fully homomorphic encryption over the real torus, where a
torus element is a signed 32-bit integer read as a fraction of 2^32. All
arithmetic wraps modulo 2^32.

The package provides:

- `torusfhe.numeric`: torus conversions and rounding (`to_int32`, `dtot32`,
  `t32tod`, `approx_phase`, `mod_switch_to_torus32`,
  `mod_switch_from_torus32`), plus seeded Gaussian and uniform sampling from
  one shared random source (`set_seed`, `gaussian32`, `uniform_torus32`).
- `torusfhe.polynomials`: `IntPolynomial` and `TorusPolynomial` modulo
  X^N + 1, with naive and Karatsuba external products (`mult_naive`,
  `mult_karatsuba`, `add_mul_r`, `sub_mul_r`). Karatsuba needs a
  power-of-two size; `add_mul_r` and `sub_mul_r` fall back to the naive
  product otherwise.
- `torusfhe.lwe`: `LweParams`, `LweKey` and `LweSample` (encryption, phase,
  trivial samples).
- `torusfhe.tlwe`: ring samples (`TLweParams`, `TLweKey`, `TLweSample`),
  sample extraction (`TLweSample.extract_lwe_sample`) and key extraction
  (`extract_key`).
- `torusfhe.tgsw`: `TGswParams`, `TGswKey`, `TGswSample`, the gadget
  decomposition (`torus32_polynomial_decomp_h`, `tlwe_decomp_h`) and the
  external product (`TGswSample.extern_product`,
  `TGswSample.extern_mul_to_tlwe`).
- `torusfhe.keyswitch`: `LweKeySwitchKey`, to move an LWE sample from one key
  to another.
- `torusfhe.gate_bootstrapping`: the default 80-bit and 128-bit parameter
  sets (`default_gate_bootstrapping_parameters`), plus boolean encryption and
  decryption (`boots_sym_encrypt`, `boots_sym_decrypt`).

Invalid arguments (mismatched sizes, exponents out of range, unsupported
security levels) raise `ValueError`.

## Installation

```
pip install .
```

## Example

Encrypt a torus message under a fresh LWE key, then read the phase back:

```python
from torusfhe.numeric import set_seed, mod_switch_to_torus32
from torusfhe.lwe import LweParams, LweKey, LweSample

set_seed([42])
params = LweParams(500, 2.44e-5, 0.012467)
key = LweKey.generate(params)

message = mod_switch_to_torus32(1, 8)
sample = LweSample.sym_encrypt(message, params.alpha_min, key)
print(sample.phase(key) - message)  # small noise
```

Boolean encryption with a default parameter set:

```python
from torusfhe.gate_bootstrapping import (
    boots_sym_decrypt,
    boots_sym_encrypt,
    default_gate_bootstrapping_parameters,
)
from torusfhe.lwe import LweKey

gb_params = default_gate_bootstrapping_parameters(128)
lwe_key = LweKey.generate(gb_params.in_out_params)
assert boots_sym_decrypt(boots_sym_encrypt(1, lwe_key), lwe_key) == 1
```

Polynomial products modulo X^N + 1:

```python
from torusfhe.polynomials import IntPolynomial, TorusPolynomial, mult_karatsuba, mult_naive

a = IntPolynomial([1, 2, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 3])
b = TorusPolynomial.uniform(16)
assert mult_karatsuba(a, b) == mult_naive(a, b)
```

## What the package does not do

It holds no serialisation: parameters, keys and samples live in memory only,
and there is no reading or writing of them to files or streams. Nor does it
carry out the bootstrapping itself or evaluate homomorphic gates; it provides
the parameter sets, the TGSW external product and key switching that such a
procedure is built from. There is no command-line tool.

## Running the tests

```
pip install .[test]
pytest
```