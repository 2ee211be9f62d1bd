"""Leads endpoint, including public lead capture."""

from src.utils.http import ResourceHandler


class handler(ResourceHandler):
    endpoint = "leads"
    resource = "leads"
