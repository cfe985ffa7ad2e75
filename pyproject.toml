[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "porytools"
version = "0.1.0"
description = "Print Porytiles command lines from saved settings, stored in a name-value JSON archive format."
requires-python = ">=3.10"
dependencies = []
keywords = ["porytiles", "tileset", "pokeemerald", "decomp", "json", "serialization", "command-line"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Code Generators",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
porytools = "porytools.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["porytools"]

[tool.hatch.build.targets.sdist]
include = ["porytools", "tests", "README.md", "pyproject.toml"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]
