"""
Shared Kernel

Building blocks shared by every engine app: the error taxonomy,
engine configuration, value objects, domain events, the unit of work
and the message bus.
"""
