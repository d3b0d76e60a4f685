"""
Quick sale auction rules
"""
