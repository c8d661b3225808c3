[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "torusfhe"
version = "0.1.0"
description = "Torus-based fully homomorphic encryption primitives: LWE, TLWE and TGSW samples, key switching and gate bootstrapping parameters"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = [
    "homomorphic encryption",
    "fhe",
    "lwe",
    "tlwe",
    "tgsw",
    "torus",
    "lattice cryptography",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Security :: Cryptography",
    "Topic :: Scientific/Engineering :: Mathematics",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["torusfhe"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
