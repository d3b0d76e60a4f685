#!/usr/bin/env python
"""
BizConnect CLI Entry Point
Quick sale countdown, bidding and admin commands
"""
import sys
import os

# Add src to path so we can import bizconnect
sys.path.insert(0, os.path.join(os.path.dirname(__file__), 'src'))

from bizconnect.cli.main import run

if __name__ == "__main__":
    run()
