"""
User notifications.
"""
