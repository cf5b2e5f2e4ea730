[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "metricagent"
version = "0.1.0"
description = "Agent that periodically samples interpreter runtime metrics and posts them in gzip-compressed JSON batches to an HTTP endpoint"
requires-python = ">=3.10"
dependencies = []
keywords = ["metrics", "monitoring", "agent", "telemetry", "gauge"]
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
    "Topic :: System :: Monitoring",
]

[project.optional-dependencies]
test = ["pytest", "pytest-asyncio"]

[project.scripts]
metric-agent = "metricagent.app:main"

[tool.hatch.build.targets.wheel]
packages = ["metricagent"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
strict = true
