"""gensmith - pseudo-generics expansion for Python templates."""

__version__ = "0.1.0"
