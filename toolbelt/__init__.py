"""Command-line client for the storefront platform."""

__version__ = "0.3.0"
