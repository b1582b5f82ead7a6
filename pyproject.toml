[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "rustyworld"
version = "0.1.0"
description = "An interpreter for the 'Another World' game data: bytecode VM, polygon renderer and resource loader."
requires-python = ">=3.10"
keywords = ["another world", "out of this world", "interpreter", "virtual machine", "game engine", "retro"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: Side-Scrolling/Arcade Games",
    "Topic :: System :: Emulators",
]
dependencies = [
    "pygame",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
rustyworld = "rustyworld.engine:main"

[tool.hatch.build.targets.wheel]
packages = ["rustyworld"]

[tool.pytest.ini_options]
addopts = "-ra"
