from pathlib import Path

import boto3
from botocore.client import Config

from intake.config.settings import Settings
from intake.storage.base import BaseObjectStore
from intake.storage.local_adapter import LocalObjectStore
from intake.storage.s3_adapter import S3ObjectStore


class ObjectStoreFactory:
    """Creates the object store adapter selected in settings."""

    BACKENDS: tuple[str, ...] = ("s3", "local")

    @classmethod
    def create(cls, settings: Settings) -> BaseObjectStore:
        backend = settings.storage_backend.lower()
        if backend == "s3":
            return cls._create_s3(settings)
        if backend == "local":
            return LocalObjectStore(
                root=Path(settings.local_storage_root),
                public_base_url=settings.storage_public_base_url,
            )
        raise ValueError(
            f"Unknown storage backend '{backend}'. Choose from: {list(cls.BACKENDS)}"
        )

    @staticmethod
    def _create_s3(settings: Settings) -> S3ObjectStore:
        client = boto3.client(
            "s3",
            region_name=settings.storage_region,
            endpoint_url=settings.storage_endpoint_url or None,
            config=Config(signature_version="s3v4", s3={"addressing_style": "virtual"}),
        )
        return S3ObjectStore(
            client=client,
            bucket=settings.storage_bucket,
            region=settings.storage_region,
            public_base_url=settings.storage_public_base_url,
            cache_control=settings.storage_cache_control,
        )
