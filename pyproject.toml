[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "arduvault"
version = "0.1.0"
description = "Command-line client for a password vault stored on an Arduino over a serial link"
requires-python = ">=3.10"
keywords = ["password", "vault", "arduino", "serial", "aes-gcm", "argon2"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Security :: Cryptography",
    "Topic :: Utilities",
]
dependencies = [
    "cryptography>=44",
    "pyserial>=3.5",
    "termcolor>=2.1",
]

[project.optional-dependencies]
test = [
    "pytest>=7",
]

[project.scripts]
arduvault = "arduvault.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["arduvault"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
