"""
Provider layer - JSON-RPC transport and provider resolution.

Uses httpx instead of the heavyweight web3.py.
"""
