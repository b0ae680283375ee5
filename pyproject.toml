[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pogpool"
version = "0.1.0"
description = "Generate C CRUD model code from PostgreSQL CREATE TABLE files, with a small connection pool"
requires-python = ">=3.10"
dependencies = []
keywords = ["postgresql", "codegen", "crud", "connection-pool", "models"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Programming Language :: C",
    "Topic :: Database",
    "Topic :: Software Development :: Code Generators",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
pogpool-generate = "pogpool.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["pogpool"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
