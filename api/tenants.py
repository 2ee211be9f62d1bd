"""Tenant records endpoint."""

from src.utils.http import ResourceHandler


class handler(ResourceHandler):
    endpoint = "tenants"
    resource = "tenants"
