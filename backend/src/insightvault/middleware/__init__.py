"""HTTP middleware for InsightVault."""
