[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "osmroute"
version = "0.1.0"
description = "A* route planning over OpenStreetMap data, with map rendering to images"
requires-python = ">=3.10"
dependencies = [
    "pillow",
]
keywords = ["openstreetmap", "osm", "a-star", "routing", "path-finding", "map"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: GIS",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
osmroute = "osmroute.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["osmroute"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
