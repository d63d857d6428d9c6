"""
Dependency providers for the training routes.
Service objects are built once in the application lifespan and stored on app.state.
"""

from fastapi import Depends, Request

from training_api.api.services.user_service import UserService
from training_api.core.training_external_service import TrainingApiClient
from training_api.domain.repositories.profile_repository import ProfileRepository
from training_api.infrastructure.database import Database


def get_database(request: Request) -> Database:
    """Shared database wrapper."""
    return request.app.state.database


def get_training_client(request: Request) -> TrainingApiClient:
    """Shared upstream API client."""
    return request.app.state.training_client


def get_profile_repository(database: Database = Depends(get_database)) -> ProfileRepository:
    """Profile repository bound to the shared database."""
    return ProfileRepository(database)


def get_user_service(
    client: TrainingApiClient = Depends(get_training_client),
    repository: ProfileRepository = Depends(get_profile_repository),
) -> UserService:
    """User service wired to the shared client and repository."""
    return UserService(client, repository)
