"""
Shared Config Module
====================

Configuration files used by the Backoffice console.

Structure:
- settings/: YAML configuration files (defaults, project, user)
"""
