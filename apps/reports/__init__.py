"""Reports app package.

Read-only occupancy, revenue and booking statistics for hotel staff. The
app owns no models; it aggregates bookings and rooms.
"""
