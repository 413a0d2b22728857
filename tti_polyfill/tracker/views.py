from pydantic import BaseModel, ConfigDict, Field


class PendingRequest(BaseModel):
	"""A request initiated by page code that has not completed yet."""

	model_config = ConfigDict(extra='forbid')

	request_id: str = Field(..., description='Opaque id supplied by the instrumentation adapter')
	start_time: float = Field(..., description='ms since navigation start')
