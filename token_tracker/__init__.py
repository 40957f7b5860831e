"""
Token tracker read core.

Answers point-in-time questions about fungible tokens indexed from a
UTXO chain: token metadata, per-owner UTXO sets, balances, supply,
transaction history and ranked token listings.
"""

__version__ = "0.1.0"
