"""
Configuration for hederakit.

- Network: supported ledger networks and their mirror-node hosts
- MirrorNodeConfig: custom mirror-node endpoint, API key and headers
- OperationalMode: autonomous execution vs. returning unsigned bytes
- KitSettings: values loaded from the environment (and ``.env``)
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Union

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

from hederakit.errors import UnsupportedNetworkError

__all__ = [
    "Network",
    "NetworkConfig",
    "NETWORKS",
    "get_network_config",
    "MirrorNodeConfig",
    "OperationalMode",
    "KitSettings",
    "API_KEY_PLACEHOLDER",
]

API_KEY_PLACEHOLDER = "<API-KEY>"


class Network(str, Enum):
    MAINNET = "mainnet"
    TESTNET = "testnet"


@dataclass
class NetworkConfig:
    name: Network
    mirror_node_url: str
    node_account_ids: List[str] = field(default_factory=list)


NETWORKS: Dict[Network, NetworkConfig] = {
    Network.MAINNET: NetworkConfig(
        name=Network.MAINNET,
        mirror_node_url="https://mainnet-public.mirrornode.hedera.com",
        node_account_ids=["0.0.3", "0.0.4", "0.0.5"],
    ),
    Network.TESTNET: NetworkConfig(
        name=Network.TESTNET,
        mirror_node_url="https://testnet.mirrornode.hedera.com",
        node_account_ids=["0.0.3", "0.0.4", "0.0.5"],
    ),
}


def _coerce_network(network: Union[Network, str]) -> Network:
    if isinstance(network, Network):
        return network
    try:
        return Network(str(network).strip().lower())
    except ValueError:
        raise UnsupportedNetworkError(str(network)) from None


def get_network_config(
    network: Union[Network, str],
    mirror_node_url: Optional[str] = None,
) -> NetworkConfig:
    """
    Look up a network.

    Raises:
        UnsupportedNetworkError: For anything but mainnet or testnet
    """
    cfg = NETWORKS[_coerce_network(network)]
    if mirror_node_url:
        return NetworkConfig(
            name=cfg.name,
            mirror_node_url=mirror_node_url,
            node_account_ids=list(cfg.node_account_ids),
        )
    return cfg


class OperationalMode(str, Enum):
    """Whether the agent submits itself or hands back unsigned bytes."""

    AUTONOMOUS = "autonomous"
    RETURN_BYTES = "returnBytes"


class MirrorNodeConfig(BaseModel):
    """
    Mirror-node endpoint configuration.

    ``custom_url`` may contain ``<API-KEY>``, which is replaced by
    ``api_key`` when requests are built.
    """

    model_config = ConfigDict(frozen=True)

    custom_url: Optional[str] = Field(
        default=None,
        description="Custom mirror node base URL",
    )
    api_key: Optional[str] = Field(
        default=None,
        description="API key sent as bearer token and X-API-Key header",
    )
    headers: Dict[str, str] = Field(
        default_factory=dict,
        description="Extra headers for every request",
    )
    timeout_ms: int = Field(
        default=30000,
        ge=1000,
        description="Per-request timeout in milliseconds",
    )


class KitSettings(BaseModel):
    """
    Settings read from the process environment.

    Example:
        ```python
        settings = KitSettings.from_env()
        kit = HederaAgentKit.from_settings(settings, submitter=submitter)
        ```
    """

    model_config = ConfigDict(frozen=True)

    network: Network = Network.TESTNET
    account_id: Optional[str] = None
    private_key: Optional[str] = Field(default=None, repr=False)
    key_type: Optional[str] = None
    user_account_id: Optional[str] = None
    operational_mode: OperationalMode = OperationalMode.RETURN_BYTES
    schedule_user_transactions_in_bytes_mode: bool = True
    mirror_node: MirrorNodeConfig = Field(default_factory=MirrorNodeConfig)

    @classmethod
    def from_env(cls, dotenv_path: Optional[str] = None) -> "KitSettings":
        """
        Load settings from ``.env`` and the environment.

        Recognised variables: HEDERA_NETWORK, HEDERA_ACCOUNT_ID,
        HEDERA_PRIVATE_KEY, HEDERA_KEY_TYPE, USER_ACCOUNT_ID,
        OPERATIONAL_MODE, SCHEDULE_USER_TRANSACTIONS, MIRROR_NODE_URL,
        MIRROR_NODE_API_KEY.

        Raises:
            UnsupportedNetworkError: If HEDERA_NETWORK is not supported
        """
        load_dotenv(dotenv_path)

        mode = os.environ.get("OPERATIONAL_MODE", OperationalMode.RETURN_BYTES.value)
        schedule_flag = os.environ.get("SCHEDULE_USER_TRANSACTIONS", "true")

        return cls(
            network=_coerce_network(os.environ.get("HEDERA_NETWORK", "testnet")),
            account_id=os.environ.get("HEDERA_ACCOUNT_ID"),
            private_key=os.environ.get("HEDERA_PRIVATE_KEY"),
            key_type=os.environ.get("HEDERA_KEY_TYPE"),
            user_account_id=os.environ.get("USER_ACCOUNT_ID") or None,
            operational_mode=OperationalMode(mode),
            schedule_user_transactions_in_bytes_mode=schedule_flag.lower() != "false",
            mirror_node=MirrorNodeConfig(
                custom_url=os.environ.get("MIRROR_NODE_URL") or None,
                api_key=os.environ.get("MIRROR_NODE_API_KEY") or None,
            ),
        )
