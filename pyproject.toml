[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cruzwallet"
version = "1.1.1"
description = "Passphrase-encrypted Ed25519 key storage with a cuckoo filter of public keys"
requires-python = ">=3.10"
keywords = ["wallet", "ed25519", "argon2", "secretbox", "cuckoo-filter"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Security :: Cryptography",
]
dependencies = [
    "cryptography",
    "pynacl",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["cruzwallet"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
