"""
FairPass.

- backend/: API, services, persistence, integrations and background tasks
"""
