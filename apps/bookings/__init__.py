"""Bookings app package.

A booking reserves one slot of the workshop's daily service capacity for a
customer's bike. This app stores bookings, assigns their yearly reference
numbers, runs the availability check before a booking is accepted and
moves bookings through their status lifecycle.
"""
