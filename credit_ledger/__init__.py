"""
Credit Ledger - Buyer Credit & Reward Service

A FastAPI-based service where sellers record credit extended to buyers,
buyers approve each credit with a one-time code, and the ledger tracks
outstanding balances, reward points and a creditworthiness score.
"""

__version__ = "0.1.0"
