"""earncal: earnings calendar with week bucketing and synced ticker favorites."""

__version__ = "0.1.0"
