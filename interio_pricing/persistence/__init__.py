"""Persistence — MongoClient, GridRepository."""

from interio_pricing.persistence.mongo_client import MongoClient
from interio_pricing.persistence.grid_repository import (
    GridRepository,
    MongoGridRepository,
    get_grid_repository,
)

__all__ = ["MongoClient", "GridRepository", "MongoGridRepository", "get_grid_repository"]
