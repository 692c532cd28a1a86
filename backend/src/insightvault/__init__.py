"""InsightVault: prompt-driven text analysis with a searchable history."""

__version__ = "0.1.0"
