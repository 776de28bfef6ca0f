[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gamebase"
version = "0.1.0"
description = "Small game-support utilities: hex dumps, chunked binary files, PNG and WAV loading, and a software audio mixer."
requires-python = ">=3.10"
dependencies = [
    "pillow",
]
keywords = ["game", "audio", "mixer", "png", "wav", "hexdump", "chunks"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Games/Entertainment",
    "Topic :: Multimedia :: Sound/Audio :: Mixers",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["gamebase"]

[tool.pytest.ini_options]
addopts = "-ra"
