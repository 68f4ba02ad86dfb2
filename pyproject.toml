[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "fnops"
version = "0.1.0"
description = "Apply, delete and run serverless function resources against a resource client, with callbacks and owner references"
requires-python = ">=3.10"
dependencies = [
    "pyyaml",
]
keywords = ["serverless", "functions", "resources", "operator", "containers"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
fnops-demo = "fnops.demo:main"

[tool.hatch.build.targets.wheel]
packages = ["fnops"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
