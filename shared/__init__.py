"""
Shared Kernel

This module contains base classes and utilities shared across all apps.
Nothing in here touches the ORM.
"""
