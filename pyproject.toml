[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "activerec"
version = "0.1.0"
description = "Runtime core for an active-record style storage layer: sharded cluster configuration, connection caching, health pinging, logging, metrics and declaration tag parsing."
requires-python = ">=3.10"
dependencies = []
keywords = [
    "activerecord",
    "orm",
    "database",
    "cluster",
    "sharding",
    "connection-pool",
]
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
    "Topic :: Database",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["activerec"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
