[build-system]
requires = ["setuptools>=64"]
build-backend = "setuptools.build_meta"

[project]
name = "akashi"
version = "1.7.0"
description = "Area state, access roles, command extensions and master-server advertising for an Attorney Online 2 server"
requires-python = ">=3.10"
dependencies = []
keywords = ["attorney-online", "roleplay", "game-server", "acl", "testimony"]
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
    "Topic :: Games/Entertainment :: Role-Playing",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.setuptools.packages.find]
include = ["akashi*"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
