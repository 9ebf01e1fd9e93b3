"""
Domain layer: ledger models, repository ports and the reconciliation,
classification, recurrence and aggregation services.
"""
