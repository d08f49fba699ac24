[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "glicol"
version = "0.1.0"
description = "A graph-oriented live-coding language for audio: parser, audio graph and engine"
requires-python = ">=3.10"
dependencies = []
keywords = ["audio", "live-coding", "synthesis", "dsp", "music", "parser", "audio-graph"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Multimedia :: Sound/Audio :: Sound Synthesis",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["glicol"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
