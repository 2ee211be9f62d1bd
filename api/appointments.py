"""Appointments endpoint."""

from src.utils.http import ResourceHandler


class handler(ResourceHandler):
    endpoint = "appointments"
    resource = "appointments"
