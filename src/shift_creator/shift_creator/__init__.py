"""Shift Creator package.

Feature modules (employees, requests, shifts, processing) follow the same
service/repository split, with a thin Flask layer for health checks,
request inspection and the worker CLI commands.
"""
