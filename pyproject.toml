[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "logtransport"
version = "0.1.0"
description = "Log transports, a background-thread transport wrapper, stream adapters and a query DSL for filtering JSON-like log records"
requires-python = ">=3.10"
dependencies = []
keywords = ["logging", "transport", "query", "filter", "threading"]
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
    "Topic :: System :: Logging",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["logtransport"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
