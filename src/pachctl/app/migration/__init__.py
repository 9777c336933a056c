from .service import (
    MIGRATION_IMAGE_REPOSITORY,
    MigrationDispatcher,
    MigrationFailure,
    MigrationOutcome,
    migration_image,
    serialize_job,
)

__all__ = [
    "MIGRATION_IMAGE_REPOSITORY",
    "MigrationDispatcher",
    "MigrationFailure",
    "MigrationOutcome",
    "migration_image",
    "serialize_job",
]
