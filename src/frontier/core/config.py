"""Configuration management for Infinite Frontier.

This module provides centralized configuration management using Pydantic Settings.
All configuration is loaded from environment variables with the FRONTIER_ prefix,
allowing endpoints, fees and credentials to change without code changes.

Environment Variable Loading
-----------------------------
Configuration values are loaded in the following priority order:
1. Environment variables (FRONTIER_* prefix)
2. .env file in the project root
3. Default values defined in FrontierConfig

Example .env file:
    FRONTIER_VENICE_API_KEY=sk-...
    FRONTIER_OPENSEA_API_KEY=...
    FRONTIER_CHAIN_ID=8453
    FRONTIER_CONTRACT_ADDRESS=0x...

Explicit Instances
------------------
Components never read a module-level configuration object.  Each client,
the mint submitter and the FastAPI application receive a ``FrontierConfig``
when they are constructed, so tests can point them at alternate endpoints or
fees without process-wide side effects:

    from frontier.core.config import FrontierConfig
    from frontier.venice.client import VeniceClient

    cfg = FrontierConfig(venice_api_base="http://localhost:9000/api/v1")
    client = VeniceClient(cfg)

Chain Selection
---------------
``chain_id`` selects the deployment.  Base mainnet (8453) maps to the
``base`` marketplace network; Base Sepolia (84532) and a local hardhat node
(31337) map to ``base_sepolia``.  The contract address is taken from
``contract_address`` when set, otherwise from ``DEPLOYED_CONTRACTS``.
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Chain ids understood by the service.
BASE_MAINNET_CHAIN_ID = 8453
BASE_SEPOLIA_CHAIN_ID = 84532
HARDHAT_CHAIN_ID = 31337

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

# Known deployments of the Infinite Frontier contract, keyed by chain id.
# Mainnet and Sepolia are filled in after deployment; hardhat uses the
# deterministic address of the first contract deployed by the default account.
DEPLOYED_CONTRACTS: dict[int, str] = {
    BASE_MAINNET_CHAIN_ID: ZERO_ADDRESS,
    BASE_SEPOLIA_CHAIN_ID: ZERO_ADDRESS,
    HARDHAT_CHAIN_ID: "0x5FbDB2315678afecb367f032d93F642f64180aa3",
}


class FrontierConfig(BaseSettings):
    """Main configuration for Infinite Frontier.

    Values are loaded from environment variables with the FRONTIER_ prefix,
    with fallback to the defaults defined here.

    Attributes
    ----------
    Image Generation:
        venice_api_key : str | None
            Credential for the Venice AI API (required for generation)
        venice_api_base : str
            Base URL of the Venice AI v1 API
        default_image_model : str
            Model identifier sent when the caller does not choose one
        venice_min_size : int
            Smallest square canvas Venice accepts (256)

    On-chain Image:
        onchain_image_size : int
            Edge length of the normalized square image (128)
        onchain_image_format : Literal["png", "jpeg", "webp"]
            Encoding used for the on-chain payload
        onchain_image_quality : int
            Quality for lossy on-chain encodings (1-100)

    Marketplace:
        opensea_api_key : str | None
            Optional OpenSea credential, sent as X-API-KEY
        opensea_api_base : str
            OpenSea v2 API for mainnet networks
        opensea_testnet_api_base : str
            OpenSea v2 API for test networks

    Chain:
        chain_id : int
            Numeric chain id selecting mainnet or the test network
        contract_address : str | None
            Override for the deployed contract address
        generate_fee_wei : int
            Fee for the generation bookkeeping call (0.00003 ETH)
        mint_fee_wei : int
            Fee sent with every mint (0.0003 ETH)

    Server:
        http_timeout : float
            Timeout in seconds for outbound HTTP calls
        server_host : str
            Bind address for uvicorn
        server_port : int
            Port for uvicorn (1024-65535)
        log_level : str
            Root logging level used by ``main()``

    Examples
    --------
        >>> cfg = FrontierConfig(chain_id=8453, _env_file=None)
        >>> cfg.is_mainnet
        True
        >>> cfg.mint_fee_wei
        300000000000000
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="FRONTIER_",
        case_sensitive=False,
        extra="ignore",
    )

    # Venice AI image generation
    venice_api_key: str | None = Field(
        default=None,
        description="Venice AI API key",
    )
    venice_api_base: str = Field(
        default="https://api.venice.ai/api/v1",
        description="Venice AI v1 API base URL",
    )
    default_image_model: str = Field(
        default="fluently-xl",
        description="Default Venice image model",
    )
    venice_min_size: int = Field(
        default=256,
        description="Minimum canvas size accepted by Venice",
        ge=64,
        le=2048,
    )

    # On-chain image normalization
    onchain_image_size: int = Field(
        default=128,
        description="Edge length of the on-chain square image",
        ge=16,
        le=1024,
    )
    onchain_image_format: Literal["png", "jpeg", "webp"] = Field(
        default="jpeg",
        description="Encoding of the on-chain image payload",
    )
    onchain_image_quality: int = Field(
        default=70,
        description="Quality for lossy on-chain encodings",
        ge=1,
        le=100,
    )

    # OpenSea marketplace
    opensea_api_key: str | None = Field(
        default=None,
        description="Optional OpenSea API key",
    )
    opensea_api_base: str = Field(
        default="https://api.opensea.io/api/v2",
        description="OpenSea API base URL for mainnet networks",
    )
    opensea_testnet_api_base: str = Field(
        default="https://testnets-api.opensea.io/api/v2",
        description="OpenSea API base URL for test networks",
    )

    # Chain and contract
    chain_id: int = Field(
        default=BASE_SEPOLIA_CHAIN_ID,
        description="Chain id (8453 Base, 84532 Base Sepolia, 31337 hardhat)",
    )
    contract_address: str | None = Field(
        default=None,
        description="Override for the deployed contract address",
    )
    generate_fee_wei: int = Field(
        default=30_000_000_000_000,
        description="Generation fee in wei (0.00003 ETH)",
        ge=0,
    )
    mint_fee_wei: int = Field(
        default=300_000_000_000_000,
        description="Mint fee in wei (0.0003 ETH)",
        ge=0,
    )

    # Server
    http_timeout: float = Field(
        default=60.0,
        description="Timeout in seconds for outbound HTTP calls",
        gt=0,
    )
    server_host: str = Field(
        default="0.0.0.0",
        description="Server bind address",
    )
    server_port: int = Field(
        default=8000,
        description="Server port",
        ge=1024,
        le=65535,
    )
    log_level: str = Field(
        default="INFO",
        description="Root logging level",
    )

    @property
    def is_mainnet(self) -> bool:
        """True when the configured chain is Base mainnet."""
        return self.chain_id == BASE_MAINNET_CHAIN_ID

    def resolve_contract_address(self) -> str:
        """Return the contract address for the configured chain.

        Raises:
            ValueError: If no override is set and the chain id is unknown.
        """
        if self.contract_address:
            return self.contract_address
        try:
            return DEPLOYED_CONTRACTS[self.chain_id]
        except KeyError:
            raise ValueError(f"No contract deployment known for chain id {self.chain_id}") from None
