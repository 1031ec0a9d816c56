"""Pricing app package.

Hotel-scoped rule tables (seasonal, day-type and occupancy multipliers),
the pricing engine that turns them into a per-night quote, and the
occupancy reporter feeding the occupancy tier.
"""
