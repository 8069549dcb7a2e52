"""In-memory reference ledger of the Infinite Frontier ERC-721 contract.

The real contract lives on Base and is reached through a wallet; this
module reproduces its observable behaviour in Python so the mint pipeline
can be exercised end to end by tests and by the local development server.

Behaviour
---------
- ``mint`` is payable.  It reverts with ``InsufficientMintFee``,
  ``EmptyPrompt`` or ``EmptyImage`` (checked in that order) and otherwise
  stores the token under the next sequential id, starting at 1.
- A revert leaves every piece of state untouched.
- ``pay_generate_fee`` only records the payment and emits an event.
- ``token_uri`` synthesises a base64 JSON data URI on every call.
- Fee and generation setters and ``withdraw`` are owner-only.

Ownership transfer and approvals belong to the inherited ERC-721 code and
are not modelled.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from frontier.chain.metadata import build_token_metadata, encode_token_uri

logger = logging.getLogger(__name__)

NAME = "Infinite Frontier"
SYMBOL = "INFR"
OG_TYPE = "OG"
INITIAL_GENERATION = "V0"

# ERC-165 interface ids advertised by the contract.
SUPPORTED_INTERFACES = frozenset(
    {
        "0x01ffc9a7",  # ERC-165
        "0x80ac58cd",  # ERC-721
        "0x5b5e139f",  # ERC-721 Metadata
        "0x780e9d63",  # ERC-721 Enumerable
    }
)


class ContractRevert(Exception):
    """A named revert raised by the contract.

    Attributes:
        name: Solidity custom error name, e.g. ``"InsufficientMintFee"``.
        params: The error's parameters in declaration order.
    """

    def __init__(self, name: str, *args: Any):
        super().__init__(name, *args)
        self.name = name
        self.params = args

    def __str__(self) -> str:
        params = ", ".join(str(p) for p in self.params)
        return f"{self.name}({params})"


@dataclass(frozen=True)
class TokenData:
    """Data stored for each minted token."""

    prompt: str
    image_base64: str
    generation: str
    nft_type: str
    minter: str
    ai_model: str
    minted_at: int


@dataclass(frozen=True)
class Event:
    """An emitted contract event."""

    name: str
    args: dict[str, Any] = field(default_factory=dict)


class InfiniteFrontierLedger:
    """Python model of the deployed Infinite Frontier contract.

    Args:
        owner: Address allowed to call the owner-only functions.
        generate_fee: Initial generation fee in wei.
        mint_fee: Initial mint fee in wei.
        generation: Initial generation tag.
        clock: Returns the current block timestamp in seconds.
    """

    name = NAME
    symbol = SYMBOL

    def __init__(
        self,
        owner: str,
        generate_fee: int,
        mint_fee: int,
        generation: str = INITIAL_GENERATION,
        clock: Callable[[], float] = time.time,
    ):
        self.owner = owner.lower()
        self.generate_fee = generate_fee
        self.mint_fee = mint_fee
        self.current_generation = generation
        self.balance = 0
        self.events: list[Event] = []
        self._clock = clock
        self._token_counter = 0
        self._tokens: dict[int, TokenData] = {}
        self._owners: dict[int, str] = {}
        self._owned: dict[str, list[int]] = {}

    @classmethod
    def from_config(cls, config, owner: str) -> InfiniteFrontierLedger:
        """Create a ledger using the fees from a FrontierConfig."""
        return cls(owner, generate_fee=config.generate_fee_wei, mint_fee=config.mint_fee_wei)

    # ------------------------------------------------------------------
    # Guards
    # ------------------------------------------------------------------

    def _only_owner(self, sender: str) -> None:
        if sender.lower() != self.owner:
            raise ContractRevert("OwnableUnauthorizedAccount", sender)

    def _require_exists(self, token_id: int) -> TokenData:
        token = self._tokens.get(token_id)
        if token is None:
            raise ContractRevert("TokenDoesNotExist", token_id)
        return token

    def _emit(self, name: str, **args: Any) -> None:
        self.events.append(Event(name, args))

    # ------------------------------------------------------------------
    # Payable entry points
    # ------------------------------------------------------------------

    def pay_generate_fee(self, sender: str, prompt: str, value: int) -> None:
        """Record a paid generation request; stores no token state."""
        if value < self.generate_fee:
            raise ContractRevert("InsufficientGenerateFee", value, self.generate_fee)
        if len(prompt) == 0:
            raise ContractRevert("EmptyPrompt")

        self.balance += value
        self._emit("ImageGenerated", user=sender.lower(), fee=value, prompt=prompt)

    def mint(self, sender: str, prompt: str, image_base64: str, ai_model: str, value: int) -> int:
        """Mint a token and return its id."""
        if value < self.mint_fee:
            raise ContractRevert("InsufficientMintFee", value, self.mint_fee)
        if len(prompt) == 0:
            raise ContractRevert("EmptyPrompt")
        if len(image_base64) == 0:
            raise ContractRevert("EmptyImage")

        minter = sender.lower()
        self._token_counter += 1
        token_id = self._token_counter

        self._tokens[token_id] = TokenData(
            prompt=prompt,
            image_base64=image_base64,
            generation=self.current_generation,
            nft_type=OG_TYPE,
            minter=minter,
            ai_model=ai_model,
            minted_at=int(self._clock()),
        )
        self._owners[token_id] = minter
        self._owned.setdefault(minter, []).append(token_id)
        self.balance += value

        self._emit(
            "NFTMinted",
            tokenId=token_id,
            minter=minter,
            prompt=prompt,
            generation=self.current_generation,
        )
        logger.info(f"Minted token #{token_id} for {minter} ({len(image_base64)} image chars)")
        return token_id

    # ------------------------------------------------------------------
    # Owner functions
    # ------------------------------------------------------------------

    def set_generate_fee(self, sender: str, new_fee: int) -> None:
        self._only_owner(sender)
        old_fee, self.generate_fee = self.generate_fee, new_fee
        self._emit("GenerateFeeUpdated", oldFee=old_fee, newFee=new_fee)

    def set_mint_fee(self, sender: str, new_fee: int) -> None:
        self._only_owner(sender)
        old_fee, self.mint_fee = self.mint_fee, new_fee
        self._emit("MintFeeUpdated", oldFee=old_fee, newFee=new_fee)

    def set_generation(self, sender: str, generation: str) -> None:
        self._only_owner(sender)
        self.current_generation = generation

    def withdraw(self, sender: str) -> int:
        """Transfer the whole balance to the owner; returns the amount."""
        self._only_owner(sender)
        amount, self.balance = self.balance, 0
        return amount

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def total_supply(self) -> int:
        return len(self._tokens)

    def current_token_id(self) -> int:
        return self._token_counter

    def owner_of(self, token_id: int) -> str:
        self._require_exists(token_id)
        return self._owners[token_id]

    def balance_of(self, owner: str) -> int:
        return len(self._owned.get(owner.lower(), []))

    def token_of_owner_by_index(self, owner: str, index: int) -> int:
        owned = self._owned.get(owner.lower(), [])
        if not 0 <= index < len(owned):
            raise ContractRevert("ERC721OutOfBoundsIndex", owner, index)
        return owned[index]

    def get_token_data(self, token_id: int) -> TokenData:
        return self._require_exists(token_id)

    def token_uri(self, token_id: int) -> str:
        token = self._require_exists(token_id)
        return encode_token_uri(build_token_metadata(token_id, token))

    def supports_interface(self, interface_id: str) -> bool:
        return interface_id.lower() in SUPPORTED_INTERFACES
