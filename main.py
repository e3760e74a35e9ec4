#!/usr/bin/env python3
"""payloadmap - Entry point."""
from payloadmap.cli.main import main

if __name__ == "__main__":
    main()
