#!/usr/bin/env python3
"""
Convenience shim to run Housekeeper from a source checkout.
Usage: python housekeeper.py [goodreads|ddns|meeting-notes|config] [--help]
"""

from housekeeper.cli import main


if __name__ == "__main__":
    main()
