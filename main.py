#!/usr/bin/env python3
"""
Main entry point for the irctab IRC client
"""

from irctab.main import run

if __name__ == "__main__":
    run()
