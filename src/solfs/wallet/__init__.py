"""
Wallet - Solana keypair storage and loading.
"""
