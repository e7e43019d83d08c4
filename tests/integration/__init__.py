"""Integration tests for the provisioner.

These tests talk to a real AWS account and require valid credentials. They
are read-only and skip themselves when no credentials are available.

Run them with:
    pytest tests/integration/ -m integration
"""
