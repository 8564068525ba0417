# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Use:
- .env (local, gitignored)
- config_local.py (local safe overrides, gitignored)

This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "RICE_APP_NAME": "App display name (default: rice-planner).",
    "RICE_LOG_LEVEL": "Console logging level (default: INFO).",
    "RICE_DATA_DIR": "Local data directory for logs (default: .local/rice_planner).",
    # Remote scorer
    "RICE_BACKEND_URL": "Scoring service base URL (default: http://localhost:8080; empty => offline mode).",
    "RICE_REQUEST_TIMEOUT_SECONDS": "Per-request timeout in seconds (default: 30; 0 => no timeout).",
    "RICE_LOCAL_FALLBACK": "Score locally when the service is unreachable during /analyze (true/false).",
    # Session / planning
    "RICE_USERNAME": "Log this user in on startup (optional).",
    "RICE_SPRINT_CAPACITY": "Initial sprint capacity in person-days (default: 40).",
}
