from __future__ import annotations

import structlog
from dependency_injector import containers, providers

from api.features.auth.hasher import CredentialHasher
from api.features.conversation.service import ConversationStore
from api.features.lectures.answering import PlaceholderAnswerGenerator
from core.settings import SETTINGS
from infra.resources import DatabaseResource


logger = structlog.get_logger("lecture_chat")


class InfrastructureContainer(containers.DeclarativeContainer):
    config = providers.Configuration()
    settings = providers.Object(SETTINGS)
    logger = providers.Object(logger)

    # Database
    database = providers.Resource(
        DatabaseResource,
        database_url=str(SETTINGS.DATABASE.DATABASE_URL),
    )


class ServiceContainer(containers.DeclarativeContainer):
    """Application services - depends on infrastructure."""

    infrastructure = providers.DependenciesContainer()

    # One store per process: it owns the per-conversation actors.
    conversation_store = providers.Singleton(
        ConversationStore,
        database=infrastructure.database,
        max_message_length=SETTINGS.CONVERSATION.MAX_MESSAGE_LENGTH,
        max_id_length=SETTINGS.CONVERSATION.MAX_ID_LENGTH,
        max_cached_histories=SETTINGS.CONVERSATION.MAX_CACHED_HISTORIES,
    )

    credential_hasher = providers.Singleton(
        CredentialHasher,
        iterations=SETTINGS.CREDENTIALS.PASSWORD_HASH_ITERATIONS,
        salt_bytes=SETTINGS.CREDENTIALS.PASSWORD_SALT_BYTES,
        hash_bytes=SETTINGS.CREDENTIALS.PASSWORD_HASH_BYTES,
    )

    answer_generator = providers.Singleton(
        PlaceholderAnswerGenerator,
    )


class ControllerContainer(containers.DeclarativeContainer):
    """Controller-specific dependencies."""

    services = providers.DependenciesContainer()

    conversation_controller = providers.Factory(
        "api.features.conversation.controller.ConversationController",
        conversation_store=services.conversation_store,
    )

    lecture_controller = providers.Factory(
        "api.features.lectures.controller.LectureController",
        conversation_store=services.conversation_store,
        answer_generator=services.answer_generator,
        id_prefix=SETTINGS.CONVERSATION.ID_PREFIX,
        max_upload_bytes=SETTINGS.LECTURES.MAX_UPLOAD_BYTES,
    )


class ApplicationContainer(containers.DeclarativeContainer):
    """Main application container composing all sub-containers."""

    wiring_config = containers.WiringConfiguration(
        modules=[
            "api.main",
            "api.features.conversation.router",
            "api.features.lectures.router",
        ]
    )

    infrastructure = providers.Container(InfrastructureContainer)
    services = providers.Container(ServiceContainer, infrastructure=infrastructure)
    controllers = providers.Container(ControllerContainer, services=services)
