"""Customers app package.

Customers are identified by their normalized phone number. A booking made
with a known phone number reuses the existing record.
"""
