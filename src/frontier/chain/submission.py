"""Preparation and submission of mint calls.

A mint is one payable call, ``mint(prompt, imageBase64, aiModel)``, sent
with the configured fee.  :class:`MintSubmitter` builds that call from the
pipeline output and hands a single attempt to a contract backend.  Signing,
nonces, gas bidding and receipts belong to the wallet layer; nothing here
retries.
"""

from __future__ import annotations

import logging
from typing import Protocol

from frontier.core.config import FrontierConfig
from frontier.core.models import MintCall
from frontier.core.validation import validate_image_payload, validate_prompt

logger = logging.getLogger(__name__)

# Rough calldata + storage cost per base64 character of the image payload.
GAS_PER_IMAGE_CHAR = 100


class ContractBackend(Protocol):
    """Anything that can execute a mint, e.g. the in-memory ledger."""

    def mint(self, sender: str, prompt: str, image_base64: str, ai_model: str, value: int) -> int: ...


def estimate_mint_gas(image_base64: str) -> int:
    return len(image_base64) * GAS_PER_IMAGE_CHAR


class MintSubmitter:
    """Builds mint calls and submits them to a contract backend."""

    def __init__(self, config: FrontierConfig, backend: ContractBackend | None = None):
        self.config = config
        self.backend = backend

    def build_mint_call(self, prompt: str, image_base64: str, ai_model: str) -> MintCall:
        """Validate inputs and describe the payable mint call.

        Only prompt emptiness/length and a non-empty image are checked here;
        the contract still enforces fee and emptiness on its own.

        Raises:
            ServiceError: validation error for a bad prompt or empty image.
            ValueError: if no contract address is known for the chain.
        """
        validate_prompt(prompt)
        validate_image_payload(image_base64)

        return MintCall(
            contract_address=self.config.resolve_contract_address(),
            chain_id=self.config.chain_id,
            prompt=prompt,
            image_base64=image_base64,
            ai_model=ai_model,
            value=self.config.mint_fee_wei,
            estimated_gas=estimate_mint_gas(image_base64),
        )

    def submit(self, call: MintCall, sender: str) -> int:
        """Execute one mint attempt and return the new token id.

        Contract reverts propagate unchanged.
        """
        if self.backend is None:
            raise RuntimeError("No contract backend configured for submission")

        logger.info(
            f"Submitting mint to {call.contract_address} on chain {call.chain_id} "
            f"(value={call.value} wei, ~{call.estimated_gas} gas)"
        )
        return self.backend.mint(sender, call.prompt, call.image_base64, call.ai_model, call.value)
