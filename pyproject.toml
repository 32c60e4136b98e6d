[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "darwinframe"
version = "0.1.0"
description = "Geometry, INI settings files, servo register maps and a CM-730 bus client for a small humanoid robot"
requires-python = ">=3.10"
dependencies = []
keywords = ["robotics", "dynamixel", "cm730", "mx28", "ini", "geometry", "humanoid"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Embedded Systems",
    "Topic :: Scientific/Engineering",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["darwinframe"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
