"""
Alerts Router - Presentation Layer

This module defines the FastAPI router for alert thresholds, the alert
history and on-demand threshold checks.
"""

from typing import List

import structlog
from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from src.application.dtos.alert_dto import (
    AlertCheckRequestDTO,
    AlertCheckResponseDTO,
    AlertNotificationDTO,
    AlertTestRequestDTO,
    AlertThresholdCreateDTO,
    AlertThresholdResponseDTO,
    AlertThresholdUpdateDTO,
)
from src.application.use_cases.alert_monitoring_use_case import AlertMonitoringUseCase
from src.application.use_cases.alert_use_cases import AlertEngine
from src.domain.entities.errors import (
    AlertDeliveryError,
    AlertThresholdNotFoundError,
    StorageUnavailableError,
)

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/alerts", tags=["Alerts"])


@router.get("/thresholds", response_model=List[AlertThresholdResponseDTO])
@inject
async def get_alert_thresholds(
    alert_engine: AlertEngine = Depends(Provide["alert_engine"]),
) -> List[AlertThresholdResponseDTO]:
    """List configured thresholds, or the defaults when none are stored."""
    try:
        thresholds = await alert_engine.get_alert_thresholds()
    except StorageUnavailableError as e:
        logger.error("alerts.thresholds.list_failed", error=e.message)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=e.message
        )
    return [AlertThresholdResponseDTO.from_entity(t) for t in thresholds]


@router.post(
    "/thresholds",
    response_model=AlertThresholdResponseDTO,
    status_code=status.HTTP_201_CREATED,
)
@inject
async def create_alert_threshold(
    threshold_dto: AlertThresholdCreateDTO,
    alert_engine: AlertEngine = Depends(Provide["alert_engine"]),
) -> AlertThresholdResponseDTO:
    try:
        threshold = await alert_engine.create_alert_threshold(threshold_dto)
    except StorageUnavailableError as e:
        logger.error("alerts.thresholds.create_failed", error=e.message)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=e.message
        )
    return AlertThresholdResponseDTO.from_entity(threshold)


@router.get("/thresholds/{threshold_id}", response_model=AlertThresholdResponseDTO)
@inject
async def get_alert_threshold(
    threshold_id: str,
    alert_engine: AlertEngine = Depends(Provide["alert_engine"]),
) -> AlertThresholdResponseDTO:
    try:
        threshold = await alert_engine.get_alert_threshold(threshold_id)
    except AlertThresholdNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return AlertThresholdResponseDTO.from_entity(threshold)


@router.put("/thresholds/{threshold_id}", response_model=AlertThresholdResponseDTO)
@inject
async def update_alert_threshold(
    threshold_id: str,
    update_dto: AlertThresholdUpdateDTO,
    alert_engine: AlertEngine = Depends(Provide["alert_engine"]),
) -> AlertThresholdResponseDTO:
    """Apply a partial update; omitted fields keep their value."""
    try:
        threshold = await alert_engine.update_alert_threshold(threshold_id, update_dto)
    except AlertThresholdNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except StorageUnavailableError as e:
        logger.error(
            "alerts.thresholds.update_failed", threshold_id=threshold_id, error=e.message
        )
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=e.message
        )
    return AlertThresholdResponseDTO.from_entity(threshold)


@router.delete("/thresholds/{threshold_id}", status_code=status.HTTP_204_NO_CONTENT)
@inject
async def delete_alert_threshold(
    threshold_id: str,
    alert_engine: AlertEngine = Depends(Provide["alert_engine"]),
) -> Response:
    try:
        await alert_engine.delete_alert_threshold(threshold_id)
    except StorageUnavailableError as e:
        logger.error(
            "alerts.thresholds.delete_failed", threshold_id=threshold_id, error=e.message
        )
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=e.message
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/history", response_model=List[AlertNotificationDTO])
@inject
async def get_alert_history(
    limit: int = Query(50, ge=1, le=100, description="Maximum records to return"),
    alert_engine: AlertEngine = Depends(Provide["alert_engine"]),
) -> List[AlertNotificationDTO]:
    """Most recent alert records first."""
    history = await alert_engine.get_alert_history(limit=limit)
    return [AlertNotificationDTO.from_entity(n) for n in history]


@router.delete("/history", status_code=status.HTTP_204_NO_CONTENT)
@inject
async def clear_alert_history(
    alert_engine: AlertEngine = Depends(Provide["alert_engine"]),
) -> Response:
    await alert_engine.clear_alert_history()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/history/{notification_id}/acknowledge")
@inject
async def acknowledge_alert(
    notification_id: str,
    alert_engine: AlertEngine = Depends(Provide["alert_engine"]),
) -> dict:
    if not await alert_engine.acknowledge_alert(notification_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Alert record with ID {notification_id} not found",
        )
    return {"id": notification_id, "acknowledged": True}


@router.post("/check", response_model=AlertCheckResponseDTO)
@inject
async def check_alerts(
    check_dto: AlertCheckRequestDTO,
    alert_monitoring_use_case: AlertMonitoringUseCase = Depends(
        Provide["alert_monitoring_use_case"]
    ),
) -> AlertCheckResponseDTO:
    """
    Evaluate the given metrics against the active thresholds.

    Fired alerts are recorded in the history and, unless ``dispatch`` is
    false, delivered on their channels. Delivery failures are reported in
    the response rather than failing the request.
    """
    return await alert_monitoring_use_case.check_metrics(
        check_dto.metrics, dispatch=check_dto.dispatch
    )


@router.post("/test", status_code=status.HTTP_202_ACCEPTED)
@inject
async def test_alert_system(
    test_dto: AlertTestRequestDTO,
    alert_engine: AlertEngine = Depends(Provide["alert_engine"]),
) -> dict:
    """Send a synthetic alert email to verify the email transport."""
    try:
        await alert_engine.test_alert_system(test_dto.recipients)
    except AlertDeliveryError as e:
        logger.error("alerts.test.failed", channel=e.channel, error=e.message)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=e.message)
    return {"status": "sent", "recipients": test_dto.recipients}
