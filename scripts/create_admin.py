#!/usr/bin/env python3
"""Register the admin account and print the SQL that grants it the ADMIN role.

Usage:
    python scripts/create_admin.py

The backend base URL comes from BACKEND_URL (default http://localhost:8082).
"""
import sys
from pathlib import Path

# Ensure project root is on sys.path so the storefront package is importable
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from storefront.admin import main


if __name__ == "__main__":
    sys.exit(main())
