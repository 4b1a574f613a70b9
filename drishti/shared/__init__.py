"""
INFRA-DRISHTI Shared Kernel
===========================

Business logic and infrastructure shared by the dashboard.

Architecture:
- core: EventBus, configuration, service registry
- infrastructure: Technical adapters (discovery provider, DuckDB, seed data)
- domain: Business logic (assets, discovery, navigation, theme, session)
"""

__all__ = []
