"""
schema-sentinel: schema compliance and drift detection for third-party contracts.
"""

__version__ = "0.1.0"
