import logging

from minio import Minio

from omi_common.config import MinioConfig

logger = logging.getLogger(__name__)


def get_minio_client(config: MinioConfig) -> Minio:
    """
    Builds a MinIO client for a user's bucket endpoint.

    Args:
        config: Decoded connection settings for the endpoint.

    Returns:
        Minio: Configured MinIO client
    """
    try:
        return Minio(
            endpoint=config.endpoint,
            access_key=config.access_key,
            secret_key=config.secret_key,
            secure=config.secure,
            region=config.region,
        )
    except Exception:
        logger.exception(
            "MinIO Client Initialization Failed",
            extra={"endpoint": config.endpoint},
        )
        raise
