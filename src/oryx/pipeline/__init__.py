"""Report pipeline stages."""
