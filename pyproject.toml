[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "vlrutil"
version = "0.1.0"
description = "Application utilities: option values from several sources, option files, a regex cache, shared instances, per-thread operation contexts, fuzzy string ranking and console capture."
requires-python = ">=3.10"
dependencies = []
keywords = ["options", "configuration", "regex", "levenshtein", "thread-context", "capture"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["vlrutil"]

[tool.pytest.ini_options]
addopts = "-ra"
