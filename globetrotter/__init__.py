"""GlobeTrotter — multi-city travel planning service."""
