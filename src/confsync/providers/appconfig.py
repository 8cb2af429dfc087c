"""
AWS AppConfig Provider

Configuration provider backed by AWS AppConfig. Profile listing uses the
control-plane `appconfig` client; sessions and pulls use the
`appconfigdata` client. boto3 calls are blocking and run in a worker
thread so only the calling task waits on the network.
"""

import asyncio
from typing import Any

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from confsync.providers.base import LatestConfiguration, Profile, ProfilePage
from confsync.utils.decorators import measure_latency
from confsync.utils.exceptions import ConfigurationError, ProfileGoneError, ProviderError
from confsync.utils.logging import get_logger

logger = get_logger(__name__)

NOT_FOUND_CODES = frozenset({"ResourceNotFoundException"})


class AppConfigProvider:
    """AWS AppConfig implementation of ConfigurationProvider."""

    def __init__(
        self,
        region: str,
        *,
        connect_timeout: float = 5,
        read_timeout: float = 30,
        max_attempts: int = 3,
        control_client: Any = None,
        data_client: Any = None,
    ):
        if not region:
            raise ConfigurationError("region is required", config_key="appconfig.region")

        self.region = region
        client_config = Config(
            region_name=region,
            connect_timeout=connect_timeout,
            read_timeout=read_timeout,
            retries={"max_attempts": max_attempts, "mode": "standard"},
        )
        self._control = control_client or boto3.client("appconfig", config=client_config)
        self._data = data_client or boto3.client("appconfigdata", config=client_config)

    async def list_profiles_page(
        self,
        application_id: str,
        next_token: str | None = None,
    ) -> ProfilePage:
        """Fetch one page of configuration profiles."""
        params = {"ApplicationId": application_id}
        if next_token:
            params["NextToken"] = next_token

        response = await self._call(
            "list_configuration_profiles",
            self._control.list_configuration_profiles,
            **params,
        )

        items = [
            Profile(id=item["Id"], name=item["Name"])
            for item in response.get("Items", [])
            if item.get("Id") and item.get("Name")
        ]
        return ProfilePage(items=items, next_token=response.get("NextToken"))

    async def start_session(
        self,
        application_id: str,
        environment_id: str,
        profile_id: str,
    ) -> str | None:
        """Start a configuration session for one profile."""
        response = await self._call(
            "start_configuration_session",
            self._data.start_configuration_session,
            ApplicationIdentifier=application_id,
            EnvironmentIdentifier=environment_id,
            ConfigurationProfileIdentifier=profile_id,
        )
        return response.get("InitialConfigurationToken")

    @measure_latency("appconfig.get_latest_configuration")
    async def get_latest(self, token: str) -> LatestConfiguration:
        """Pull the latest configuration for a session token."""
        response = await self._call(
            "get_latest_configuration",
            self._data.get_latest_configuration,
            ConfigurationToken=token,
        )

        body = response.get("Configuration")
        payload = await asyncio.to_thread(body.read) if body is not None else None

        return LatestConfiguration(
            payload=payload,
            content_type=response.get("ContentType"),
            version=self._parse_version(response.get("VersionLabel")),
            next_token=response.get("NextPollConfigurationToken"),
        )

    async def close(self) -> None:
        """Close the underlying HTTP connection pools."""
        for client in (self._control, self._data):
            close = getattr(client, "close", None)
            if close is not None:
                await asyncio.to_thread(close)

    async def _call(self, operation: str, method: Any, **params: Any) -> dict[str, Any]:
        """Run a boto3 call off the event loop and translate its errors."""
        try:
            return await asyncio.to_thread(method, **params)
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code", "Unknown")
            if code in NOT_FOUND_CODES and operation == "get_latest_configuration":
                raise ProfileGoneError(
                    f"Configuration profile no longer exists: {e}",
                    operation=operation,
                ) from e
            raise ProviderError(
                f"AppConfig {operation} failed: {e}",
                operation=operation,
                error_code=code,
            ) from e
        except BotoCoreError as e:
            raise ProviderError(f"AppConfig {operation} failed: {e}", operation=operation) from e

    @staticmethod
    def _parse_version(label: str | None) -> int | None:
        """Return the version label as a number when it is one."""
        if label is None:
            return None
        try:
            return int(label)
        except (TypeError, ValueError):
            return None
