"""Azure Retail Prices export: fetch, normalise, derive and publish as CSV."""

__version__ = "0.1.0"
