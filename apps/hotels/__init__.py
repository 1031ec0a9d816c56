"""Hotels app package.

Catalog of hotels, the room types guests reserve against and the physical
rooms assigned at check-in together with their operational status.
"""
