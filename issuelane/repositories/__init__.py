"""Repository layer: all Supabase table and storage access."""

from issuelane.repositories.base_repository import BaseRepository, RepositoryError
from issuelane.repositories.file_repository import FileRepository
from issuelane.repositories.ticket_repository import TicketRepository
from issuelane.repositories.user_repository import UserRepository

__all__ = [
    "BaseRepository",
    "FileRepository",
    "RepositoryError",
    "TicketRepository",
    "UserRepository",
]
