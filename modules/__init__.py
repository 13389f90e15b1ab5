"""
Application Modules.

- backend/: API, services, repositories, row store and configuration
"""
