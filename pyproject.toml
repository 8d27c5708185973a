[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "greenlux"
version = "0.1.0"
description = "Greenhouse light-intensity monitoring: photodiode readings over serial, lux estimation by Newton-Raphson, and MongoDB storage."
requires-python = ">=3.10"
keywords = [
    "greenhouse",
    "photodiode",
    "light sensor",
    "lux",
    "newton-raphson",
    "serial",
    "mongodb",
    "monitoring",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Human Machine Interfaces",
]
dependencies = [
    "pymongo",
    "pyserial",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
greenlux = "greenlux.app:main"

[tool.hatch.build.targets.wheel]
packages = ["greenlux"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]
