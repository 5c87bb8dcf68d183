"""
Infrastructure adapter: AWS Secrets Manager → ISecretStore.

boto3 is synchronous, so every call runs on a worker thread via
asyncio.to_thread; the event loop stays free for sibling fetches. botocore
errors (ClientError and client-side failures such as missing credentials or an
unreachable endpoint) are translated into domain errors here and nowhere else.
"""

import asyncio
import os
from typing import Any, Callable, Optional

import boto3
import structlog
from botocore.exceptions import BotoCoreError, ClientError

from secret_tree.domain.entities.secret import (
    CreatedSecret,
    DeletedSecret,
    SecretListItem,
    SecretPage,
    SecretRecord,
)
from secret_tree.domain.errors import RateLimited, SecretStoreError
from secret_tree.domain.ports.secret_store_port import ISecretStore

logger = structlog.get_logger(__name__)

# Error codes Secrets Manager uses when a caller is being throttled.
THROTTLING_CODES = frozenset(
    {
        "ThrottlingException",
        "Throttling",
        "TooManyRequestsException",
        "RequestLimitExceeded",
        "LimitExceededException",
    }
)


def translate_client_error(exc: ClientError) -> SecretStoreError:
    """Map a botocore ClientError onto the domain error hierarchy."""
    error = exc.response.get("Error", {})
    code = error.get("Code") or "SecretStoreError"
    message = error.get("Message") or str(exc)
    if code in THROTTLING_CODES:
        return RateLimited(message, code)
    return SecretStoreError(message, code)


class SecretsManagerAdapter(ISecretStore):
    """Reads and writes secrets in AWS Secrets Manager."""

    def __init__(self, region: str | None = None, client: Any = None) -> None:
        """
        Args:
            region: AWS region. Falls back to AWS_DEFAULT_REGION, then us-east-1.
            client: Pre-built boto3 secretsmanager client (skips construction).
        """
        self._client = client or boto3.client(
            "secretsmanager",
            region_name=region or os.environ.get("AWS_DEFAULT_REGION", "us-east-1"),
        )

    async def _call(self, operation: Callable[..., dict], **params: Any) -> dict:
        try:
            return await asyncio.to_thread(operation, **params)
        except ClientError as exc:
            translated = translate_client_error(exc)
            logger.debug(
                "secrets_manager_error",
                operation=getattr(operation, "__name__", str(operation)),
                code=translated.code,
            )
            raise translated from exc
        except BotoCoreError as exc:
            logger.debug(
                "secrets_manager_error",
                operation=getattr(operation, "__name__", str(operation)),
                code=type(exc).__name__,
            )
            raise SecretStoreError(str(exc), type(exc).__name__) from exc

    async def list_secrets_page(self, next_token: Optional[str] = None) -> SecretPage:
        params: dict[str, Any] = {}
        if next_token:
            params["NextToken"] = next_token
        response = await self._call(self._client.list_secrets, **params)
        items = [
            SecretListItem(
                name=entry["Name"],
                arn=entry["ARN"],
                description=entry.get("Description"),
                created_date=entry.get("CreatedDate"),
            )
            for entry in response.get("SecretList", [])
        ]
        return SecretPage(items=items, next_token=response.get("NextToken"))

    async def get_secret_value(
        self,
        secret_id: str,
        version_id: Optional[str] = None,
        version_stage: Optional[str] = None,
    ) -> SecretRecord:
        params: dict[str, Any] = {"SecretId": secret_id}
        if version_id:
            params["VersionId"] = version_id
        elif version_stage:
            params["VersionStage"] = version_stage
        response = await self._call(self._client.get_secret_value, **params)
        return SecretRecord(
            name=response["Name"],
            arn=response["ARN"],
            version_id=response.get("VersionId", ""),
            raw_value=response.get("SecretString"),
            created_date=response.get("CreatedDate"),
            binary_value=response.get("SecretBinary"),
            version_stages=tuple(response.get("VersionStages", ())),
        )

    async def create_secret(
        self,
        name: str,
        secret_string: Optional[str] = None,
        secret_binary: Optional[bytes] = None,
        kms_key_id: Optional[str] = None,
        description: Optional[str] = None,
        client_request_token: Optional[str] = None,
        tags: Optional[list[dict]] = None,
    ) -> CreatedSecret:
        params: dict[str, Any] = {"Name": name}
        if secret_binary is not None:
            params["SecretBinary"] = secret_binary
        else:
            params["SecretString"] = secret_string
        if kms_key_id:
            params["KmsKeyId"] = kms_key_id
        if description:
            params["Description"] = description
        if client_request_token:
            params["ClientRequestToken"] = client_request_token
        if tags:
            params["Tags"] = tags
        response = await self._call(self._client.create_secret, **params)
        return CreatedSecret(
            name=response["Name"],
            arn=response["ARN"],
            version_id=response.get("VersionId"),
        )

    async def delete_secret(self, secret_id: str, force: bool = False) -> DeletedSecret:
        params: dict[str, Any] = {"SecretId": secret_id}
        if force:
            params["ForceDeleteWithoutRecovery"] = True
        response = await self._call(self._client.delete_secret, **params)
        return DeletedSecret(
            name=response["Name"],
            arn=response["ARN"],
            deletion_date=response.get("DeletionDate"),
        )
