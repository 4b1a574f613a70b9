"""
Shared Domain Module
====================

- assets: Asset models and the asset store
- discovery: query -> provider -> merged assets
- navigation: view state machine with the admin gate
- theme: dark-mode preference
- context.session: signed-in user lookup
"""
