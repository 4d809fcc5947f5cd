[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "loomlang"
version = "0.1.0"
description = "Syntax tree, formatter and editor-support helpers for the Loom pipe-flow scripting language"
requires-python = ">=3.10"
dependencies = []
keywords = ["loom", "pipeline", "formatter", "syntax-tree", "completion", "editor-support"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Software Development :: Interpreters",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["loomlang"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
