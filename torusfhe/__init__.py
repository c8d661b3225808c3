"""Torus-based homomorphic encryption: LWE, TLWE and TGSW primitives, key switching and gate bootstrapping parameters."""

__version__ = "0.1.0"

__all__ = [
    "numeric",
    "polynomials",
    "lwe",
    "tlwe",
    "tgsw",
    "keyswitch",
    "gate_bootstrapping",
]