"""
Services module.

Contains:
- Auth service: nonce generation and request signing
- Exchange service: transport, dispatcher and the endpoint client
"""
