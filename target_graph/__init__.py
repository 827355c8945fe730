"""Target dependency graphs for CMake builds."""

__version__ = "0.1.0"
