"""
connectors — third-party data-source connections.

Provides a small connector framework that handles:
  • OAuth2 auth-URL generation with a signed ``state``
  • Callback handling (code → token exchange)
  • Per-user, per-provider token storage (one row, upsert-by-user)
  • Fernet encryption of tokens at rest
  • Connection status / disconnect

Each provider is a subclass of BaseConnector (currently only Wix).
"""
