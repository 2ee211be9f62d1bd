"""Maintenance requests endpoint. New requests without a priority are triaged by the LLM."""

from src.utils.http import ResourceHandler


class handler(ResourceHandler):
    endpoint = "maintenance"
    resource = "maintenance_requests"
