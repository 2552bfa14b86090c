"""DevBytes playlist cache service."""
