[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "racing_metrics"
version = "0.1.0"
description = "Replay biathlon race events and build a resulting table of competitors"
requires-python = ">=3.10"
keywords = ["biathlon", "race", "events", "results", "timing"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Utilities",
]
dependencies = []

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
racing-metrics = "racing_metrics.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["racing_metrics"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
