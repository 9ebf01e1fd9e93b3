"""
Infrastructure layer: persistence, auth, exports and the web surface.
"""
