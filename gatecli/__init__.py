"""
Gateway CLI

Operator diagnostics for gateway secrets, certificates and topologies.
"""

__version__ = "1.0.0"
__build__ = "unknown"
