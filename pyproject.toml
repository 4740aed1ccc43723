[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "wrykit"
version = "0.1.0"
description = "HTTP request and response types for custom webview protocols, asset serving helpers and benchmark tooling"
requires-python = ">=3.10"
dependencies = []
keywords = ["webview", "http", "custom-protocol", "range-requests", "benchmark", "strace", "hyperfine"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries",
    "Topic :: System :: Benchmark",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
wrykit-run-benchmark = "wrykit.run_benchmark:main"
wrykit-build-jsons = "wrykit.build_jsons:main"

[tool.hatch.build.targets.wheel]
packages = ["wrykit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
