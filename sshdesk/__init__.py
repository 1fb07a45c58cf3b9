"""sshdesk: local SQLite backend for managing SSH keys and server records."""

__version__ = "0.1.0"
