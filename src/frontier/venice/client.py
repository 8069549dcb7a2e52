"""Venice AI image generation client.

Venice exposes an OpenAI-compatible images API.  :class:`VeniceClient`
translates a :class:`~frontier.core.models.GenerationRequest` into exactly
one ``POST /images/generations`` call and maps the response into a
:class:`~frontier.core.models.GenerationResult`.

Request Shape
-------------
    {
        "model": "fluently-xl",
        "prompt": "...",
        "size": "256x256",
        "n": 1,
        "response_format": "b64_json",
        "seed": 42,               # only when provided
        "steps": 20,              # only when provided
        "cfg_scale": 7.0,         # only when provided
        "negative_prompt": "..."  # only when provided
    }

Optional fields are omitted rather than sent as ``null``.

Error Mapping
-------------
- non-2xx responses raise a ``generation`` :class:`ServiceError` carrying the
  HTTP status and the remote error code (``UNKNOWN_ERROR`` when absent)
- transport failures (DNS, connection reset, timeout) propagate as the
  underlying ``httpx`` exception
- a 2xx response whose body is not JSON raises ``INVALID_RESPONSE`` (502)
- a 2xx response with zero images is returned as-is

The HTTP client is injectable so tests can use ``httpx.MockTransport``.
"""

from __future__ import annotations

import logging

import httpx

from frontier.core.config import FrontierConfig
from frontier.core.errors import ServiceError
from frontier.core.models import GeneratedImage, GenerationRequest, GenerationResult, OnchainImage
from frontier.core.validation import validate_prompt
from frontier.imaging.normalizer import decode_base64_image, normalize_image

logger = logging.getLogger(__name__)

# Type tags that mark a model as image-capable.
IMAGE_MODEL_TYPES = frozenset({"image", "image-generation"})

# Identifier fragments that suggest an image model when no type tag says so.
IMAGE_MODEL_FRAGMENTS = ("image", "dall", "fluently", "sd-")


def is_image_model(entry: dict) -> bool:
    """Best-effort check whether a models-listing entry is image-capable."""
    model_type = entry.get("type") or entry.get("object")
    model_id = entry.get("id") or entry.get("name")
    if isinstance(model_type, str) and model_type in IMAGE_MODEL_TYPES:
        return True
    if not isinstance(model_id, str):
        return False
    model_id = model_id.lower()
    return any(fragment in model_id for fragment in IMAGE_MODEL_FRAGMENTS)


class VeniceClient:
    """Client for the Venice AI images and models endpoints.

    Args:
        config: Application configuration (base URL, default model, sizes).
        http_client: Optional shared ``httpx.AsyncClient``.  When omitted
            the client creates and owns one.
    """

    def __init__(self, config: FrontierConfig, http_client: httpx.AsyncClient | None = None):
        self.config = config
        self.base_url = config.venice_api_base.rstrip("/")
        self.default_model = config.default_image_model
        self.min_size = config.venice_min_size
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=config.http_timeout)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http.aclose()

    async def __aenter__(self) -> VeniceClient:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    # ------------------------------------------------------------------
    # Request construction
    # ------------------------------------------------------------------

    def build_payload(self, request: GenerationRequest) -> dict:
        """Build the JSON body for an images/generations call."""
        if request.width and request.height:
            size = f"{request.width}x{request.height}"
        else:
            size = f"{self.min_size}x{self.min_size}"

        body: dict = {
            "model": request.model or self.default_model,
            "prompt": request.prompt,
            "size": size,
            "n": 1,
            "response_format": "b64_json",
        }

        if request.seed is not None:
            body["seed"] = request.seed
        if request.steps is not None:
            body["steps"] = request.steps
        if request.cfg_scale is not None:
            body["cfg_scale"] = request.cfg_scale
        if request.negative_prompt is not None:
            body["negative_prompt"] = request.negative_prompt

        return body

    @staticmethod
    def _auth_headers(api_key: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {api_key}"}

    @staticmethod
    def _error_from_response(response: httpx.Response) -> ServiceError:
        """Map a failed response to a generation ServiceError."""
        message = f"API request failed with status {response.status_code}"
        code = "UNKNOWN_ERROR"

        try:
            data = response.json()
        except ValueError:
            text = response.text
            if text:
                message = text
        else:
            if isinstance(data, dict) and isinstance(data.get("error"), dict):
                error = data["error"]
                message = error.get("message") or message
                code = error.get("code") or error.get("type") or code
            elif isinstance(data, dict) and data.get("message"):
                message = data["message"]

        return ServiceError.generation(message, response.status_code, code)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def generate_image(self, request: GenerationRequest, api_key: str) -> GenerationResult:
        """Generate one image from a prompt.

        Args:
            request: Generation parameters.
            api_key: Venice AI credential.

        Returns:
            GenerationResult whose ``images`` mirror the response ``data``
            array in order (possibly empty).

        Raises:
            ServiceError: generation error on a non-2xx response or a 2xx
                response whose body is not JSON.
            httpx.TransportError: if no response was received at all.
        """
        body = self.build_payload(request)
        url = f"{self.base_url}/images/generations"

        logger.info(f"Requesting image from Venice (model={body['model']}, size={body['size']})")

        response = await self._http.post(
            url,
            json=body,
            headers={"Content-Type": "application/json", **self._auth_headers(api_key)},
        )

        if not response.is_success:
            error = self._error_from_response(response)
            logger.warning(f"Venice generation failed: {error.status} {error.code}: {error.message}")
            raise error

        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"Venice returned a non-JSON body (status {response.status_code})")
            raise ServiceError.generation(
                "Invalid response from image generation service", 502, "INVALID_RESPONSE"
            ) from e

        items = data.get("data") if isinstance(data, dict) else None
        images = tuple(
            GeneratedImage(base64=item.get("b64_json") or "", url=item.get("url"))
            for item in (items if isinstance(items, list) else [])
        )

        seed = (data.get("seed") if isinstance(data, dict) else None) or request.seed or 0

        logger.info(f"Venice returned {len(images)} image(s) (seed={seed})")
        return GenerationResult(images=images, model=body["model"], seed=seed)

    async def check_health(self, api_key: str) -> bool:
        """Return True when the models endpoint answers with a 2xx status.

        Never raises; any failure is reported as ``False``.
        """
        try:
            response = await self._http.get(
                f"{self.base_url}/models", headers=self._auth_headers(api_key)
            )
            return response.is_success
        except Exception as e:
            logger.warning(f"Venice health check failed: {e}")
            return False

    async def list_image_models(self, api_key: str) -> list[str]:
        """Return identifiers of image-capable models, in source order.

        Raises:
            ServiceError: generation error ``MODELS_FETCH_ERROR`` on a
                non-2xx response.
        """
        response = await self._http.get(
            f"{self.base_url}/models", headers=self._auth_headers(api_key)
        )

        if not response.is_success:
            raise ServiceError.generation(
                "Failed to fetch models", response.status_code, "MODELS_FETCH_ERROR"
            )

        try:
            data = response.json()
        except ValueError as e:
            raise ServiceError.generation(
                "Failed to fetch models", response.status_code, "MODELS_FETCH_ERROR"
            ) from e

        models = data if isinstance(data, list) else (data.get("data") or [])

        model_ids = []
        for entry in models:
            if not isinstance(entry, dict) or not is_image_model(entry):
                continue
            model_id = entry.get("id") or entry.get("name") or ""
            if model_id:
                model_ids.append(model_id)
        return model_ids

    async def generate_for_onchain(
        self,
        prompt: str,
        api_key: str,
        *,
        model: str | None = None,
    ) -> OnchainImage:
        """Generate at the minimum canvas and normalize for on-chain storage.

        Validates the prompt, generates one ``min_size`` square image and
        normalizes the first result to the configured on-chain size, format
        and quality.

        Raises:
            ServiceError: validation error for a bad prompt, generation error
                for a failed call, when no image came back (500) or when the
                returned image cannot be decoded (502, ``INVALID_IMAGE``).
        """
        validate_prompt(prompt)

        result = await self.generate_image(
            GenerationRequest(
                prompt=prompt,
                width=self.min_size,
                height=self.min_size,
                model=model,
            ),
            api_key,
        )

        first = result.first_image
        if first is None or not first.base64:
            raise ServiceError.generation("No image generated", 500, "NO_IMAGE")

        size = self.config.onchain_image_size
        try:
            source_bytes = len(decode_base64_image(first.base64))
            normalized = normalize_image(
                first.base64,
                size,
                size,
                self.config.onchain_image_format,
                quality=self.config.onchain_image_quality,
            )
        except ServiceError as e:
            logger.error(f"Venice returned an undecodable image: {e.message}")
            raise ServiceError.generation(
                "Generated image could not be decoded", 502, "INVALID_IMAGE"
            ) from e

        logger.info(
            f"Normalized on-chain image: {source_bytes} -> {normalized.byte_length} bytes "
            f"({normalized.format} {size}x{size})"
        )

        return OnchainImage(
            prompt=prompt,
            model=result.model,
            seed=result.seed,
            source_byte_length=source_bytes,
            image=normalized,
        )
