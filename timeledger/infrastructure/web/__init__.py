"""
HTTP surface: routers, middleware and dependency wiring.
"""
