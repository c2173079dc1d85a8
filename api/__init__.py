"""
API client layer for the Light The Lamp draft bot

HTTP client for communicating with the database REST API.
"""
from .client import APIClient, eq, get_global_client, cleanup_global_client

__all__ = ['APIClient', 'eq', 'get_global_client', 'cleanup_global_client']
