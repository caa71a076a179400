"""
Datastore - Instruction encoding for the Solana Data Store Program.

Borsh layouts, instruction builders, and metadata decoding. No network
access happens in this package.
"""
