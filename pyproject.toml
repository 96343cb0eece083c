[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cairn"
version = "0.1.0"
description = "Building blocks for a C++20 modules build tool: source scanning, a light preprocessor, module maps and process helpers"
requires-python = ">=3.10"
keywords = ["c++", "modules", "build", "preprocessor", "scanner", "module-map"]
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
    "Topic :: Software Development :: Build Tools",
]
dependencies = [
    "pyyaml",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["cairn"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
