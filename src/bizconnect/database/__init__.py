"""
Database layer for quick sales
"""
