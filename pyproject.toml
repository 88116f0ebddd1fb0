[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "fhirpath-types"
version = "0.1.0"
description = "FHIRPath value types: booleans, strings, numbers, quantities, temporal values, collections and JSON-backed objects"
requires-python = ">=3.10"
dependencies = []
keywords = ["fhir", "fhirpath", "healthcare", "hl7", "types", "quantity", "datetime"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Healthcare Industry",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["fhirpath_types"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
