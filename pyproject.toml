[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "x87rt"
version = "0.1.0"
description = "x87 floating-point register state and fdlibm-style double-precision math routines"
requires-python = ">=3.10"
dependencies = []
keywords = ["x87", "fpu", "floating-point", "emulation", "libm", "ieee754"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Emulators",
    "Topic :: Scientific/Engineering :: Mathematics",
]

[project.optional-dependencies]
test = ["pytest", "hypothesis"]

[tool.hatch.build.targets.wheel]
packages = ["x87rt"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
