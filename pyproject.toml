[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "navutil"
version = "0.1.0"
description = "Navigation utilities: odometry smoothing, Bresenham line iteration, transform helpers and a single-goal action server"
requires-python = ">=3.10"
dependencies = []
keywords = ["navigation", "robotics", "odometry", "bresenham", "action-server", "transforms"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["navutil"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
