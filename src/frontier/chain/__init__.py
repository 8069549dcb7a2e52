"""Contract model and mint submission.

contract
    In-memory reference ledger of the Infinite Frontier ERC-721 contract.
metadata
    Token URI synthesis matching the contract's output.
submission
    Builds the payable ``mint`` call and submits it to a backend.
"""

from frontier.chain.contract import ContractRevert, InfiniteFrontierLedger, TokenData
from frontier.chain.submission import MintSubmitter

__all__ = ["ContractRevert", "InfiniteFrontierLedger", "MintSubmitter", "TokenData"]
