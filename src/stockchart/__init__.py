"""
StockChart package initializer.
Provides package version and exposed subpackages.
"""

__all__ = [
    "utils",
    "data",
    "chart",
    "ui",
]

__version__ = "0.1.0"
