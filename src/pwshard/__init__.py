"""Duration-balanced sharding for Playwright test suites."""

__version__ = "0.1.0"
