#!/usr/bin/env python
"""
BizConnect Web Server Entry Point
Flask REST API for quick sales
"""
import sys
import os

# Add src to path so we can import bizconnect
sys.path.insert(0, os.path.join(os.path.dirname(__file__), 'src'))

from bizconnect.web.app import run_server

if __name__ == "__main__":
    run_server(debug=True, host='0.0.0.0', port=5001)
