"""
API Views Package.

One module per area: trade, transactions, kyc, notifications, settings,
the admin desk, authentication and health probes.
"""
