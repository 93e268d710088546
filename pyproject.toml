[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "darkfactory"
version = "0.1.0"
description = "Run prompts in a Docker container and release the results with git: configuration, semantic versions, changelog updates, branches and pull requests."
requires-python = ">=3.10"
dependencies = [
    "pyyaml",
]
keywords = ["git", "release", "changelog", "semver", "docker", "automation", "prompts"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Version Control :: Git",
    "Topic :: Software Development :: Build Tools",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["darkfactory"]

[tool.pytest.ini_options]
addopts = "-ra"
