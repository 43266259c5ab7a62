"""relflow: declarative release workflows."""

__version__ = "0.1.0"
