"""Users app package.

Staff accounts are Django's built-in ``auth.User`` with ``is_staff`` set.
This app provides the JWT login used by the admin dashboard.
"""
