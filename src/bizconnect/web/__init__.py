"""
Flask web service
"""
