"""
Noves MCP server package.

This package exposes LLM-friendly wallet, transaction, and token price tools
backed by the Noves Translate and Pricing APIs. See DESIGN.md for full details.
"""

__all__ = ["config"]
