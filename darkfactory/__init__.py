"""Configuration, Docker prompt execution, semantic versions and git release tooling."""

__version__ = "0.1.0"