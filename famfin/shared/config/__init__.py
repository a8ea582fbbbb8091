"""
Shared Config Module
====================

Static configuration shipped with the package.

Structure:
- settings/: YAML configuration files (defaults, user)
"""
