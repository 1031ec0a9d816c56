"""Coupons app package.

Promotional codes (hotel-scoped or global), their validation against a
booking amount and the per-booking usage ledger.
"""
