#!/usr/bin/env python3
"""
Startup script for container deployment
Runs migrations and seeds the initial accounts before starting the API
"""

import os
import subprocess
import sys


def run_command(command, description):
    """Run a command and report the outcome"""
    print(f"{description}...")
    try:
        result = subprocess.run(command, check=True, capture_output=True, text=True)
        print(f"{description} completed successfully")
        if result.stdout:
            print(result.stdout)
        return True
    except subprocess.CalledProcessError as e:
        print(f"{description} failed: {e}")
        if e.stderr:
            print(f"Error: {e.stderr}")
        return False


def main():
    print("Starting College Leave Tracker...")

    if not run_command([sys.executable, "migrate.py"], "Database migration"):
        print("Database migration failed, but continuing...")

    if os.getenv("SEED_USERS", "false").lower() == "true":
        if not run_command([sys.executable, "create_users.py"], "Initial user seeding"):
            print("User seeding failed, but continuing...")

    port = os.getenv("PORT", "8000")
    print(f"Starting server on port {port}...")
    try:
        subprocess.run(
            ["uvicorn", "leave_tracker.main:create_app", "--factory", "--host", "0.0.0.0", "--port", port],
            check=True,
        )
    except subprocess.CalledProcessError as e:
        print(f"Failed to start server: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
