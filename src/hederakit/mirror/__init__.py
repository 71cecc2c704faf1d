"""
Mirror-node query client and response models.
"""

from hederakit.mirror.client import (
    DEFAULT_PAGE_CAP,
    MirrorNodeClient,
    decode_topic_message,
    evaluate_key_access,
)
from hederakit.mirror.types import (
    AccountBalance,
    AccountResponse,
    KeyInfo,
    Links,
    NftDetail,
    ScheduleInfo,
    ScheduleStatus,
    TokenBalance,
    TopicMessage,
    TopicResponse,
    timestamp_to_datetime,
)

__all__ = [
    # Client
    "DEFAULT_PAGE_CAP",
    "MirrorNodeClient",
    "decode_topic_message",
    "evaluate_key_access",
    # Types
    "AccountBalance",
    "AccountResponse",
    "KeyInfo",
    "Links",
    "NftDetail",
    "ScheduleInfo",
    "ScheduleStatus",
    "TokenBalance",
    "TopicMessage",
    "TopicResponse",
    "timestamp_to_datetime",
]
