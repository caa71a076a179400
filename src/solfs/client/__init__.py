"""
Client - On-chain interaction layer for the Data Store Program.

Provides a JSON-RPC client, transaction utilities, and high-level
data store flows for talking to a Solana cluster.

Uses httpx + solders instead of the heavyweight solana-py.
"""
