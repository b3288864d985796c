"""Client-side data access: API client and query cache."""

from todocockpit.client.api import CockpitClient, ClientError
from todocockpit.client.cache import QueryCache, CATEGORIES, LABELS, TODOS

__all__ = ["CockpitClient", "ClientError", "QueryCache", "CATEGORIES", "LABELS", "TODOS"]
