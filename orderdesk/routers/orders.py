from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from orderdesk.dependencies import get_order_service
from orderdesk.logging_config import get_logger
from orderdesk.schemas.order import OrderPayload, OrderResponse
from orderdesk.services.order_service import OrderService
from orderdesk.services.result import INTERNAL_ERROR, INVALID_PAYLOAD, Result

logger = get_logger("orders")

router = APIRouter()


def _failure(result: Result) -> JSONResponse:
    body = OrderResponse(success=False, error=result.error).model_dump(include={"success", "error"})
    return JSONResponse(status_code=result.status_code, content=body)


@router.post("/api/telegram/send-order", response_model=OrderResponse)
async def send_order(request: Request, orders: OrderService = Depends(get_order_service)):
    """Notify every admin about a placed order and hand back the bot deep link."""
    try:
        payload = OrderPayload.model_validate(await request.json())
    except (ValueError, ValidationError) as e:
        logger.warning(f"Invalid order payload: {e}")
        return _failure(Result.invalid(INVALID_PAYLOAD))

    try:
        result = await orders.submit(payload)
    except Exception as e:
        logger.error(f"send-order error: {e}", exc_info=True)
        result = Result.failure(str(e) or INTERNAL_ERROR)

    if not result.ok:
        return _failure(result)

    return JSONResponse(content=result.value.model_dump(by_alias=True, exclude={"error"}))
