"""
Application Layer - Use Cases and Ports

This layer contains:
- Port definitions (interfaces for persistence, storage, messaging, time)
- Trade validation (fail-fast gate before a transaction exists)
- Ledger use cases (create, approve, query, rates, quote, KYC)
- Notification dispatcher and inbox

NO framework dependencies allowed (pure Python).
"""
