[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "respot"
version = "0.1.0"
description = "Streaming-service metadata models, playback settings, audio output sinks and local-network device discovery"
requires-python = ">=3.10"
dependencies = [
    "cryptography",
]
keywords = [
    "audio",
    "music",
    "streaming",
    "metadata",
    "playlist",
    "zeroconf",
    "mdns",
    "discovery",
]
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
    "Topic :: Multimedia :: Sound/Audio :: Players",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["respot"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
