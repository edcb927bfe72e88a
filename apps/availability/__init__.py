"""Availability app package.

Holds the workshop calendar: the settings singleton with the closed days of
the week and the daily service cap, admin-defined excluded dates, and the
pure availability engine under ``domain`` that decides whether a date can
take a new booking.
"""
