"""Pydantic models for the detection engine inputs."""

from pydantic import BaseModel, ConfigDict, Field


class NetworkRequest(BaseModel):
	"""A completed network request, timestamps in ms relative to navigation start."""

	model_config = ConfigDict(extra='forbid', frozen=True)

	start: float = Field(..., description='When the request was issued')
	end: float = Field(..., description='When the response finished or failed')


class LongTask(BaseModel):
	"""A main-thread task long enough to block input handling."""

	model_config = ConfigDict(extra='forbid', frozen=True)

	start: float = Field(..., description='Task start')
	end: float = Field(..., description='Task end')
