[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tmmux"
version = "0.1.0"
description = "Helpers for an MPEG-2 transport stream multiplexer: rate-limited stream buffers, section carousels, playlist documents and IPC channels"
requires-python = ">=3.10"
dependencies = []
keywords = ["mpeg2", "transport-stream", "multiplexer", "carousel", "playlist", "named-pipe", "shared-memory"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Video",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["tmmux"]

[tool.pytest.ini_options]
addopts = "-ra"
