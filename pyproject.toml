[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mcedecode"
version = "0.1.0"
description = "Decode model-specific bits of x86 machine check (MCE) records from Intel and AMD processors into readable messages"
requires-python = ">=3.10"
dependencies = []
keywords = ["mce", "machine check", "ras", "hardware errors", "ecc"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Monitoring",
    "Topic :: System :: Hardware",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["mcedecode"]

[tool.pytest.ini_options]
addopts = "-ra"
