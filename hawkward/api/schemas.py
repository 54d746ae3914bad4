"""Request and response bodies of the HTTP API."""

from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class SaveStoreRequest(ApiModel):
    store_name: Optional[str] = None
    data: Any = None
    key: Optional[Union[str, int]] = None


class SystemSettingsRequest(ApiModel):
    timeout: Optional[int] = Field(
        default=None,
        ge=1,
        le=86400,
        description="Seconds without a heartbeat before shutdown"
    )
    enabled: Optional[bool] = None


class SuccessResponse(ApiModel):
    success: bool = True


class ImportResponse(ApiModel):
    message: str


class HeartbeatResponse(ApiModel):
    status: str = "alive"


class SystemSettingsResponse(ApiModel):
    success: bool = True
    timeout: Union[int, float]
    enabled: bool


class TabClosedResponse(ApiModel):
    acknowledged: bool = True


class HealthResponse(ApiModel):
    status: str = "ok"
    monitor: str
    timeout: Union[int, float]
    enabled: bool
    suppressed: bool
    pending_writes: int


def seconds(value: float) -> Union[int, float]:
    """Render whole seconds as an integer, the way the client sent them."""
    return int(value) if float(value).is_integer() else value
