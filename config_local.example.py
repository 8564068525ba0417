# config_local.example.py

"""
Example local overrides.

Usage:
  1) Copy this file to `config_local.py`
  2) Adjust values for your machine
  3) Never commit `config_local.py` (it is gitignored)

Prefer `.env` for configuration. This file should contain only safe overrides.
"""

# Example: point at a scoring service on another host
# BACKEND_URL = "http://192.168.1.20:8080"

# Example: keep /analyze working while the service is down
# LOCAL_FALLBACK = True
