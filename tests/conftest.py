"""
Shared test configuration.

Settings are read from the environment when app.main is imported, so the
required variables are seeded before any test module imports the app.
"""

import os

os.environ.setdefault("GITHUB_TOKEN", "test_token")
os.environ.setdefault("GITHUB_WEBHOOK_SECRET", "test_secret")
os.environ.setdefault("OPENAI_API_KEY", "test_key")
