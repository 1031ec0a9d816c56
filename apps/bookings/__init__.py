"""Bookings app package.

This app encapsulates the booking lifecycle: availability checks against
room-type inventory, price snapshots taken at creation, coupon redemption
and the booking status state machine (pending, confirmed, checked in,
checked out, cancelled). Availability checks and inserts run in one
transaction with the room type row locked where the database supports it.
"""
