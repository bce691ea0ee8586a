"""slothrules - grouped Prometheus rule files for SLOs."""

__version__ = "0.1.0"
