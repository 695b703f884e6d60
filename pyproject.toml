[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "promkit"
version = "1.3.0"
description = "Prometheus metrics instrumentation: counters, gauges, histograms, summaries, text exposition and a scrape endpoint"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "prometheus",
    "metrics",
    "monitoring",
    "instrumentation",
    "exposition",
    "histogram",
    "summary",
]
classifiers = [
    "Development Status :: 5 - Production/Stable",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Monitoring",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["promkit"]

[tool.hatch.build.targets.sdist]
include = ["promkit", "tests"]

[tool.pytest.ini_options]
addopts = "-ra"
