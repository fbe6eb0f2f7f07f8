"""Domain layer: address aggregates, reconciliation and import engines."""
