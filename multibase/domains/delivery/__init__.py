"""Delivery domain: parallel multi-endpoint POST with per-endpoint failure isolation."""
