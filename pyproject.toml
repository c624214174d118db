[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "connkit"
version = "0.1.0"
description = "Asyncio building blocks for network clients and servers: DNS-resolving TCP and TLS connectors, TLS acceptors, channels, counters and byte strings."
requires-python = ">=3.11"
dependencies = []
keywords = [
    "asyncio",
    "tls",
    "ssl",
    "tcp",
    "connector",
    "acceptor",
    "dns",
    "resolver",
    "channel",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Framework :: AsyncIO",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet",
    "Topic :: Software Development :: Libraries",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
    "cryptography",
]

[project.scripts]
connkit-serve = "connkit.serve:main"

[tool.hatch.build.targets.wheel]
packages = ["connkit"]

[tool.hatch.build.targets.sdist]
include = ["connkit", "tests", "README.md", "pyproject.toml"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 99
target-version = "py311"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.11"
warn_unused_ignores = true
warn_redundant_casts = true
