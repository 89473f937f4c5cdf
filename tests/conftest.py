"""Test configuration and fixtures."""

import os

import logfire

# No backoff between read retries in tests
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("LEDGER__READ_RETRY_MIN_WAIT", "0")
os.environ.setdefault("LEDGER__READ_RETRY_MAX_WAIT", "0")

# Keep spans and logs local
logfire.configure(send_to_logfire=False, console=False)
