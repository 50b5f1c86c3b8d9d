[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "robbb"
version = "0.1.0"
description = "Core library for a Discord community moderation bot: SQLite storage, configuration, embeds and text helpers"
requires-python = ">=3.10"
dependencies = []
keywords = ["discord", "bot", "moderation", "chat", "sqlite"]
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
    "Topic :: Communications :: Chat",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["robbb"]

[tool.hatch.build.targets.sdist]
include = ["robbb", "tests"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]
