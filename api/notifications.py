"""Realtor notifications endpoint (list, mark read, dismiss)."""

from src.utils.http import ResourceHandler


class handler(ResourceHandler):
    endpoint = "notifications"
    resource = "notifications"
