"""Bookings app package.

The reservation authority: validating and creating bookings against the
availability of their target, freezing the nightly rate, and driving the
booking and payment lifecycles. Date overlap is decided inside one
transaction that holds a lock on the booking target.
"""
