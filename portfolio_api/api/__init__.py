"""
HTTP layer: dependencies, middleware and routers.
"""
