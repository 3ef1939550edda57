"""Generative model transports.

Both clients expose the same coroutine::

    generate(user_text, system_prompt, *, use_search=False, json_mode=False, response_schema=None) -> Optional[str]

Transport failures and non-success statuses raise ``ModelUnavailableError``.
A reply that carries no text returns ``None``; callers decide what "empty"
means for their feature.
"""

from __future__ import annotations

from typing import Optional, Protocol

import groq
import httpx

from streak_mentor.core.errors import ModelUnavailableError, ValidationError


class ModelClient(Protocol):
    async def generate(
        self,
        user_text: str,
        system_prompt: str,
        *,
        use_search: bool = False,
        json_mode: bool = False,
        response_schema: Optional[dict] = None,
    ) -> Optional[str]:
        ...


class GeminiClient:
    """``generateContent`` over httpx, with optional search grounding."""

    def __init__(
        self,
        api_key: Optional[str],
        model: str,
        *,
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        timeout: float = 30.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._http_client = http_client

    @property
    def url(self) -> str:
        return f"{self.base_url}/models/{self.model}:generateContent"

    def build_payload(
        self,
        user_text: str,
        system_prompt: str,
        *,
        use_search: bool,
        json_mode: bool,
        response_schema: Optional[dict] = None,
    ) -> dict:
        payload: dict = {
            "contents": [{"parts": [{"text": user_text}]}],
            "systemInstruction": {"parts": [{"text": system_prompt}]},
        }
        if use_search:
            payload["tools"] = [{"google_search": {}}]
        if json_mode:
            generation_config: dict = {"responseMimeType": "application/json"}
            if response_schema is not None:
                generation_config["responseSchema"] = response_schema
            payload["generationConfig"] = generation_config
        return payload

    async def generate(
        self,
        user_text: str,
        system_prompt: str,
        *,
        use_search: bool = False,
        json_mode: bool = False,
        response_schema: Optional[dict] = None,
    ) -> Optional[str]:
        payload = self.build_payload(
            user_text,
            system_prompt,
            use_search=use_search,
            json_mode=json_mode,
            response_schema=response_schema,
        )
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["x-goog-api-key"] = self.api_key

        try:
            if self._http_client is not None:
                response = await self._http_client.post(self.url, json=payload, headers=headers)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.post(self.url, json=payload, headers=headers)
        except httpx.HTTPError as exc:
            raise ModelUnavailableError(f"Model request failed: {exc.__class__.__name__}") from exc

        if not response.is_success:
            raise ModelUnavailableError(f"API Error: {response.status_code}")

        try:
            data = response.json()
        except ValueError as exc:
            raise ModelUnavailableError("Model returned a non-JSON envelope") from exc

        return _first_candidate_text(data)


def _first_candidate_text(data) -> Optional[str]:
    try:
        text = data["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        return None
    return text if isinstance(text, str) else None


class GroqClient:
    """Chat completions through the Groq SDK. No search grounding."""

    def __init__(self, api_key: Optional[str], model: str, *, timeout: float = 30.0, client=None):
        self.model = model
        self._client = client or groq.AsyncGroq(api_key=api_key, timeout=timeout)

    async def generate(
        self,
        user_text: str,
        system_prompt: str,
        *,
        use_search: bool = False,
        json_mode: bool = False,
        response_schema: Optional[dict] = None,
    ) -> Optional[str]:
        if use_search:
            raise ValidationError("Search grounding is not available on the groq provider")

        # Groq JSON mode takes no schema; response_schema only shapes Gemini replies.
        kwargs = {}
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        try:
            completion = await self._client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_text},
                ],
                **kwargs,
            )
        except groq.APIError as exc:
            raise ModelUnavailableError(f"Model request failed: {exc.__class__.__name__}") from exc

        if not completion.choices:
            return None
        return completion.choices[0].message.content


def build_gemini_client(settings_obj, http_client: Optional[httpx.AsyncClient] = None) -> GeminiClient:
    return GeminiClient(
        settings_obj.GEMINI_API_KEY,
        settings_obj.GEMINI_MODEL,
        base_url=settings_obj.GEMINI_BASE_URL,
        timeout=settings_obj.LLM_TIMEOUT_SECONDS,
        http_client=http_client,
    )


def build_model_client(settings_obj) -> ModelClient:
    """Pick the text-generation provider named by LLM_PROVIDER."""
    provider = (settings_obj.LLM_PROVIDER or "gemini").lower()
    if provider == "groq":
        return GroqClient(settings_obj.GROQ_API_KEY, settings_obj.GROQ_MODEL, timeout=settings_obj.LLM_TIMEOUT_SECONDS)
    if provider == "gemini":
        return build_gemini_client(settings_obj)
    raise ValidationError(f"Unknown LLM provider: {provider}")
