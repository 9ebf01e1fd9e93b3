"""
Database engine, sessions and tables.
"""
