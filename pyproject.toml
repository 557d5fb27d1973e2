[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "spanalloc"
version = "0.1.0"
description = "A simulated three-tier concurrent memory allocator: thread caches, a central span cache and a page cache"
requires-python = ">=3.10"
dependencies = []
keywords = ["allocator", "memory", "span", "page cache", "size class", "simulation"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
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
test = ["pytest"]

[project.scripts]
spanalloc-benchmark = "spanalloc.benchmark:main"

[tool.hatch.build.targets.wheel]
packages = ["spanalloc"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
