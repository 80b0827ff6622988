#!/usr/bin/env python3
"""
EczemaHub - Launch Script
Usage:
    python run.py                      # Serve the catalog gateway (default)
    python run.py init --admin alice   # First-time setup
    python run.py inspect              # Show the current snapshot
"""

import sys
from pathlib import Path

# Ensure the project root is in the Python path
sys.path.insert(0, str(Path(__file__).parent))

from eczemahub.main import main

if __name__ == "__main__":
    main()
