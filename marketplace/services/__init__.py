"""
Services Module

Gateway payload normalization and customer notifications.
"""
