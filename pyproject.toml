[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "arcsynth"
version = "0.1.0"
description = "Program synthesis toolkit for ARC-style grid puzzles: a grid DSL, search strategies and learned transforms."
requires-python = ">=3.10"
dependencies = []
keywords = ["arc", "program-synthesis", "grid", "reasoning", "cellular-automata", "search"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering :: Artificial Intelligence",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["arcsynth"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
