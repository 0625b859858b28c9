"""Result calculator API: one-shot calculation and a debounced form session.

Session protocol (JSON messages over the websocket):

    -> {"type": "update", "fields": {"entry_price": "100", ...}}
    -> {"type": "manual", "result": "42.00"}
    -> {"type": "reset", "fields": {...}, "result": ""}
    <- {"type": "result", "result": "500.00", "mode": "auto"}
    <- {"type": "mode", "mode": "manual" | "auto"}
    <- {"type": "error", "detail": "..."}
"""

import logging
from typing import Any, Literal

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from pydantic import BaseModel, ValidationError, field_validator

from journal.engine.auto_calc import WATCHED_FIELDS, ResultAutoCalculator, calculate_result
from journal.utils.constants import POSITION_TYPES

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/calculator", tags=["calculator"])


class ResultRequest(BaseModel):
    entry_price: str | float | None = None
    sell_price: str | float | None = None
    quantity_sold: str | float | None = None
    quantity: str | float | None = None
    position_type: str = "buy"

    @field_validator("position_type")
    @classmethod
    def _validate_position_type(cls, value: str) -> str:
        if value not in POSITION_TYPES:
            allowed = ", ".join(POSITION_TYPES)
            raise ValueError(f"must be one of: {allowed}")
        return value


class SessionMessage(BaseModel):
    type: Literal["update", "manual", "reset"]
    fields: dict[str, Any] = {}
    result: str | None = None


@router.post("/result")
def compute_result(body: ResultRequest):
    """Result for the given close inputs; null when inputs are incomplete."""
    return {"result": calculate_result(**body.model_dump())}


@router.websocket("/session")
async def result_session(websocket: WebSocket):
    await websocket.accept()

    async def push_result(value: str):
        await websocket.send_json({"type": "result", "result": value, "mode": calculator.mode.value})

    calculator = ResultAutoCalculator(on_result=push_result)
    try:
        while True:
            try:
                message = SessionMessage.model_validate_json(await websocket.receive_text())
            except ValidationError as e:
                await websocket.send_json({
                    "type": "error",
                    "detail": e.errors(include_url=False, include_context=False, include_input=False),
                })
                continue

            if message.type == "update":
                unknown = set(message.fields) - set(WATCHED_FIELDS)
                if unknown:
                    await websocket.send_json({
                        "type": "error",
                        "detail": f"Unknown fields: {', '.join(sorted(unknown))}",
                    })
                    continue
                calculator.update(**message.fields)
            elif message.type == "manual":
                calculator.mark_manual(message.result)
                await websocket.send_json({"type": "mode", "mode": calculator.mode.value})
            else:
                calculator.reset(message.fields, message.result or "")
                await websocket.send_json({"type": "mode", "mode": calculator.mode.value})
    except WebSocketDisconnect:
        logger.debug("Result calculator session disconnected")
    finally:
        calculator.close()
