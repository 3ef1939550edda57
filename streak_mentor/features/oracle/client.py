"""Trusted current-date lookup.

Asks a search-grounded model for today's UTC date in a fixed JSON shape,
``{"current_utc_date": "YYYY-MM-DD"}``. Only that field is read. One attempt
per call; retries are the caller's business.
"""

from __future__ import annotations

import json
from datetime import date

from streak_mentor.core.errors import ModelUnavailableError, OracleMalformedResponseError, OracleUnavailableError
from streak_mentor.core.tracing import start_span
from streak_mentor.features.ai.client import ModelClient
from streak_mentor.features.ai.prompts import TIME_CHECK_SYSTEM_PROMPT, TIME_CHECK_USER_TEXT
from streak_mentor.features.streaks.store import parse_date

DATE_FIELD = "current_utc_date"

# Structured-output schema sent with the time check.
DATE_RESPONSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        DATE_FIELD: {"type": "STRING"},
    },
}


def parse_oracle_reply(text) -> date:
    """Extract the verified date from the oracle's JSON reply text.

    Raises:
        OracleMalformedResponseError: not JSON, not an object, field missing,
            or the field is not a YYYY-MM-DD date.
    """
    if not text:
        raise OracleMalformedResponseError("Oracle returned no text")
    try:
        data = json.loads(text)
    except ValueError as exc:
        raise OracleMalformedResponseError("Oracle reply is not valid JSON") from exc

    if not isinstance(data, dict) or DATE_FIELD not in data:
        raise OracleMalformedResponseError(f"Oracle reply is missing {DATE_FIELD}")

    raw = data[DATE_FIELD]
    try:
        return parse_date(raw)
    except ValueError as exc:
        raise OracleMalformedResponseError(f"Oracle date is not YYYY-MM-DD: {raw!r}") from exc


class DateOracleClient:
    def __init__(self, model: ModelClient):
        self._model = model

    async def fetch_verified_date(self) -> date:
        with start_span("oracle.fetch"):
            try:
                text = await self._model.generate(
                    TIME_CHECK_USER_TEXT,
                    TIME_CHECK_SYSTEM_PROMPT,
                    use_search=True,
                    json_mode=True,
                    response_schema=DATE_RESPONSE_SCHEMA,
                )
            except ModelUnavailableError as exc:
                raise OracleUnavailableError(exc.message) from exc
            return parse_oracle_reply(text)
