# ai_routes.py
# /api/ai: space-expert chat backed by Gemini generateContent.

import logging
from typing import Any, Dict, Optional

import httpx
from fastapi import APIRouter, Body, Depends, HTTPException, Query, status

from . import config
from .nasa_routes import get_http_client
from .schemas import ChatRequest, ChatResponse
from .upstream import is_error, post_api_data

logger = logging.getLogger("astroai.ai")

router = APIRouter(prefix="/api/ai", tags=["AI"])


class GeminiError(Exception):
    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


def _extract_text(data: Dict[str, Any]) -> str:
    try:
        parts = data["candidates"][0]["content"]["parts"]
    except (KeyError, IndexError, TypeError):
        return ""
    return "".join(p.get("text", "") for p in parts if isinstance(p, dict)).strip()


async def generate_answer(
    message: Optional[str],
    client: Optional[httpx.AsyncClient] = None,
    missing_message: str = "message is required",
) -> str:
    """
    Sends one user message to Gemini with the space-expert system instruction.

    Raises GeminiError carrying the status code the route should answer with.
    """
    if not config.GEMINI_API_KEY:
        raise GeminiError(
            status.HTTP_501_NOT_IMPLEMENTED,
            "Gemini is not configured (GEMINI_API_KEY missing)",
        )
    if not message or not message.strip():
        raise GeminiError(status.HTTP_400_BAD_REQUEST, missing_message)

    url = f"{config.GEMINI_BASE}/models/{config.GEMINI_MODEL}:generateContent"
    payload = {
        "system_instruction": {"parts": [{"text": config.CHAT_SYSTEM_INSTRUCTION}]},
        "contents": [{"role": "user", "parts": [{"text": message}]}],
    }
    headers = {"Content-Type": "application/json", "X-goog-api-key": config.GEMINI_API_KEY}
    data = await post_api_data(url, payload, client, headers=headers)
    if is_error(data):
        logger.error(f"Gemini chat error: {data}")
        raise GeminiError(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            f"Failed to get AI response: {data['error']}",
        )

    text = _extract_text(data)
    if not text:
        raise GeminiError(status.HTTP_502_BAD_GATEWAY, "Empty response from Gemini")
    return text


async def _answer(
    message: Optional[str], client: httpx.AsyncClient, missing_message: str = "message is required"
) -> ChatResponse:
    try:
        return ChatResponse(response=await generate_answer(message, client, missing_message))
    except GeminiError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message)


@router.post("/chat", response_model=ChatResponse, summary="Ask the space expert.")
async def post_chat(
    body: Optional[ChatRequest] = Body(None),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    return await _answer(body.message if body else None, client)


@router.get("/chat", response_model=ChatResponse, summary="Ask the space expert (browser testing).")
async def get_chat(
    message: Optional[str] = Query(None, description="Question for the assistant."),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    return await _answer(message, client, 'Query param "message" is required')
