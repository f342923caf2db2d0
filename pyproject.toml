[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "orderengine"
version = "0.1.0"
description = "Price-time priority order books per symbol, served over a newline-delimited JSON TCP gateway."
requires-python = ">=3.10"
dependencies = []
keywords = ["order book", "matching engine", "trading", "exchange", "gateway"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: Financial and Insurance Industry",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Office/Business :: Financial :: Investment",
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
orderengine = "orderengine.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["orderengine"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
