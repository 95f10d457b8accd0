[build-system]
requires = ["hatchling>=1.18"]
build-backend = "hatchling.build"

[project]
name = "bptools"
version = "0.1.0"
description = "Tools for Terraform blueprints: build step timings, a GitHub catalog listing and blueprint metadata helpers."
requires-python = ">=3.10"
keywords = [
    "terraform",
    "blueprints",
    "cloud-build",
    "catalog",
    "metadata",
    "github",
    "markdown",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Build Tools",
]
dependencies = [
    "requests>=2.28",
    "jinja2>=3.1",
    "markdown-it-py>=2.2",
    "pyyaml>=6.0",
]

[project.optional-dependencies]
test = [
    "pytest>=7.4",
]

[project.scripts]
bptools-catalog = "bptools.catalog_cli:main"

[tool.hatch.build.targets.wheel]
packages = ["bptools"]

[tool.hatch.build.targets.sdist]
include = [
    "bptools",
    "tests",
    "pyproject.toml",
]

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
