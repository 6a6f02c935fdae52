"""HTTP API for ScanVault."""
