[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "flange"
version = "0.1.0"
description = "Queue-based control and I/O bridge between software clients and a running hardware simulation"
requires-python = ">=3.10"
dependencies = []
keywords = ["simulation", "hdl", "dpi", "verification", "rpc"]
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
    "Topic :: Scientific/Engineering :: Electronic Design Automation (EDA)",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["flange"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
