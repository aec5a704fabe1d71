[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "loopworks"
version = "1.0.0"
description = "A small thread-pool event loop with chainable futures and delayed tasks"
requires-python = ">=3.10"
dependencies = []
keywords = ["event loop", "futures", "promises", "thread pool", "scheduling", "concurrency"]
classifiers = [
    "Development Status :: 4 - Beta",
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
test = ["pytest"]

[project.scripts]
loopworks-demo = "loopworks.examples:main"

[tool.hatch.build.targets.wheel]
packages = ["loopworks"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
