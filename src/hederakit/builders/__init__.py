"""
hederakit Builders.

One builder per ledger service. Every construction method returns a
BuiltTransaction (transaction + Notes); builders keep no state between
calls.

- AccountBuilder: accounts, HBAR transfers, allowances, schedule signing
- HtsBuilder: fungible tokens and NFT collections
- HcsBuilder: consensus topics and messages
- ScsBuilder: smart contracts
"""

from hederakit.builders.base import BaseServiceBuilder, apply_transaction_options
from hederakit.builders.defaults import ParameterDefault, apply_parameter_defaults
from hederakit.builders.account import AccountBuilder
from hederakit.builders.hts import CustomFeeSpec, HtsBuilder, TokenCreateParams
from hederakit.builders.hcs import HcsBuilder
from hederakit.builders.scs import ScsBuilder, function_selector

__all__ = [
    # Base
    "BaseServiceBuilder",
    "apply_transaction_options",
    # Declarative defaults
    "ParameterDefault",
    "apply_parameter_defaults",
    # Domains
    "AccountBuilder",
    "HtsBuilder",
    "CustomFeeSpec",
    "TokenCreateParams",
    "HcsBuilder",
    "ScsBuilder",
    "function_selector",
]
