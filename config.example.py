# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Do NOT commit real secrets (token, encryption key). Use a local, gitignored .env.

This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "TASKSYNC_APP_NAME": "App display name (default: tasksync).",
    "TASKSYNC_LOG_LEVEL": "Console logging level (default: INFO).",
    # Server
    "TASKSYNC_SERVER": "Server URL (default: http://localhost:3000).",
    "TASKSYNC_TOKEN": "Bearer token; normally obtained with 'tasksync login' instead.",
    "TASKSYNC_VERIFY": "Verify the TLS certificate chain (true/false, default: true).",
    "TASKSYNC_CA_PATH": "PEM file with the only CA(s) to trust (see 'tasksync cert').",
    "TASKSYNC_TIMEOUT_SECONDS": "HTTP timeout in seconds (default: 30).",
    # Sync
    "TASKSYNC_MAX_RETRIES": "Automatic retries on conflicting updates (default: none).",
    "TASKSYNC_ENCRYPTION_KEY": "Passphrase for end-to-end encryption (default: send plaintext).",
    # Paths (gitignored)
    "TASKSYNC_DATA_DIR": "Local data directory (default: .local/tasksync).",
    "TASKSYNC_TASKS_PATH": "Local task list JSON (default: <data_dir>/tasks.json).",
    "TASKSYNC_TOKEN_PATH": "Stored session token (default: <data_dir>/token).",
}
