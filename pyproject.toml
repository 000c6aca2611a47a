[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "lasrkit"
version = "0.1.0"
description = "Building blocks for point cloud processing: grids, point grouping, point schemas, headers, filters, in-memory rasters and pipeline parsing."
requires-python = ">=3.10"
dependencies = [
    "psutil",
]
keywords = ["lidar", "point cloud", "raster", "gis", "grid", "point filter"]
classifiers = [
    "Development Status :: 3 - Alpha",
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

[tool.hatch.build.targets.wheel]
packages = ["lasrkit"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
