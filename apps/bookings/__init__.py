"""Bookings app package.

This app encapsulates the booking domain: the booking model, the
reservation manager that creates, reschedules and cancels bookings, and
the REST endpoints in front of it. No two bookings of a spot may overlap;
the manager enforces this by checking and writing under a row lock on the
spot, and PostgreSQL deployments add an exclusion constraint.
"""
