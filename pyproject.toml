[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "graphedit"
version = "0.7.0"
description = "Graph document model with GraphML and GraphViz readers, diff-based undo and document session bookkeeping"
requires-python = ">=3.10"
dependencies = [
    "psutil",
]
keywords = ["graph", "graphml", "graphviz", "dot", "undo", "editor"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Visualization",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
graphedit = "graphedit.app:main"

[tool.hatch.build.targets.wheel]
packages = ["graphedit"]

[tool.pytest.ini_options]
addopts = "-ra"
