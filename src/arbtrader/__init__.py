"""Order model and venue-agnostic exchange layer for multi-venue arbitrage."""
