"""
Shared Kernel

Base classes, value objects, the reservation error taxonomy and the
unit-of-work/message-bus plumbing used by every StayBook app.
"""
