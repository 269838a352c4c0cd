"""
S3 object storage client.
"""

import logging
from typing import BinaryIO, Optional, Union
from urllib.parse import quote

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .exceptions import UploadError
from .models import StorageSettings


class S3Storage:
    """Thin wrapper exposing a single put_object operation."""

    def __init__(self, settings: StorageSettings, client=None):
        self.settings = settings
        self.client = client if client is not None else self._create_client(settings)

    @staticmethod
    def _create_client(settings: StorageSettings):
        kwargs = {}
        if settings.region:
            kwargs['region_name'] = settings.region
        # Blank keys fall through to the default AWS credential chain
        if settings.access_key_id and settings.secret_access_key:
            kwargs['aws_access_key_id'] = settings.access_key_id
            kwargs['aws_secret_access_key'] = settings.secret_access_key
        return boto3.client('s3', **kwargs)

    def put_object(self, bucket: str, key: str, body: Union[bytes, BinaryIO]) -> str:
        """Store ``body`` under ``bucket``/``key`` and return the object URL."""
        try:
            self.client.put_object(Bucket=bucket, Key=key, Body=body)
        except (BotoCoreError, ClientError) as e:
            raise UploadError(str(e)) from e
        logging.debug(f"Stored s3://{bucket}/{key}")
        return self.object_url(bucket, key, self.settings.region)

    @staticmethod
    def object_url(bucket: str, key: str, region: Optional[str] = None) -> str:
        host = f"{bucket}.s3.{region}.amazonaws.com" if region else f"{bucket}.s3.amazonaws.com"
        return f"https://{host}/{quote(key)}"
