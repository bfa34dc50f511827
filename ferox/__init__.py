"""Configuration, HTTP client and start-up banner for a recursive content discovery scanner."""

__version__ = "0.1.0"
__all__ = ["banner", "client", "configuration", "defaults", "loader", "merging"]