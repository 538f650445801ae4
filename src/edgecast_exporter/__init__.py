"""Prometheus exporter for Edgecast realtime CDN stats."""

__version__ = "0.1.0"
