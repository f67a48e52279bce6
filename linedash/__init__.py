"""Production-line efficiency analytics service."""
