"""Typed models and hex encoding for Ethereum JSON-RPC requests and responses."""

__version__ = "0.1.0"