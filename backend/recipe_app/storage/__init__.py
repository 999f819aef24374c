"""
Recipe App Storage
==================

Hosted collaborators (document rows, blobs) and the repositories built
on them: saved recipes, pantry, shopping list.
"""

from .blobs import BlobStore, InMemoryBlobStore, SupabaseBlobStore, get_blob_store
from .client import create_supabase_client
from .documents import DocumentStore, InMemoryDocumentStore, SupabaseDocumentStore, get_document_store
from .pantry import PantryRepository
from .saved import SavedRecipeRepository
from .shopping import ShoppingListRepository, coerce_shopping_entry

__all__ = [
    "BlobStore",
    "InMemoryBlobStore",
    "SupabaseBlobStore",
    "get_blob_store",
    "create_supabase_client",
    "DocumentStore",
    "InMemoryDocumentStore",
    "SupabaseDocumentStore",
    "get_document_store",
    "PantryRepository",
    "SavedRecipeRepository",
    "ShoppingListRepository",
    "coerce_shopping_entry",
]
