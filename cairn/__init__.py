"""Building blocks for a C++20 modules build tool: source scanning, a light preprocessor, module maps and process helpers."""

__version__ = "0.1.0"