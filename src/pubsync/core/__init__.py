"""Core pipeline stages for pubsync."""
