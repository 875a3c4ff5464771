"""HTTP transport used by provider clients."""
