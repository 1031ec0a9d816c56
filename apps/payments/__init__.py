"""Payments app package.

Time-boxed payment sessions per booking, the UPI payment instruction they
carry, and the settlement records created when staff verify a payment.
Verification confirms the booking in the same transaction.
"""
