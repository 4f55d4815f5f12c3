"""Spots app package.

A spot is a bookable rental listing owned by a single user. Within this
project the app acts as the spot directory for reservations: it answers
whether a spot exists and who owns it.
"""
