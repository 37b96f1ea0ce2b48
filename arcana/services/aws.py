"""Shared AWS helpers for service clients."""

from __future__ import annotations

from typing import Any

import boto3

from arcana.config.settings import settings


def create_boto3_client(
    service_name: str,
    *,
    region_name: str | None = None,
    aws_access_key_id: str | None = None,
    aws_secret_access_key: str | None = None,
) -> boto3.client:
    """Instantiate a boto3 client, using explicit keys when both are given.

    Without explicit keys the Polly credentials from settings are used, and
    failing those boto3's default provider chain applies.
    """

    region = region_name or settings.polly.region
    client_kwargs: dict[str, Any] = {"region_name": region}
    if aws_access_key_id and aws_secret_access_key:
        client_kwargs["aws_access_key_id"] = aws_access_key_id
        client_kwargs["aws_secret_access_key"] = aws_secret_access_key
    elif settings.polly.access_key and settings.polly.secret_key:
        client_kwargs["aws_access_key_id"] = settings.polly.access_key
        client_kwargs["aws_secret_access_key"] = settings.polly.secret_key
    return boto3.client(service_name, **client_kwargs)


__all__ = ["create_boto3_client"]
