"""
Ledger - REST interaction layer for the Bluzelle client.

Provides the HTTP transport, account lookup, fee resolution, transaction
validation, broadcast with conflict retry, and the single-flight worker.

Uses httpx for HTTP and eth-keys for secp256k1 signing.
"""
