"""
Kernel: models, identity and permissions.
"""
