"""Routing — discovery, route table construction, and the compiled router.

Route files are discovered and walked once at startup; the resulting
table is registered into a router that is frozen before serving.
"""
