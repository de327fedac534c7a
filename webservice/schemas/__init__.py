# webservice/schemas/__init__.py
from .models import FetcherSettings, HttpMethod, Resource, Result

__all__ = ["Resource", "Result", "HttpMethod", "FetcherSettings"]
