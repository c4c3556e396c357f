"""
Core application components: app factory, lifecycle and shared domain primitives
"""
