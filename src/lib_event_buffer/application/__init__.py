"""Application layer: ports consumed by the event buffer."""
