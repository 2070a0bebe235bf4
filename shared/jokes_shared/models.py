from typing import Literal

from pydantic import BaseModel, ConfigDict


class Joke(BaseModel):
    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: int
    title: str
    body: str


class JokeListResponse(BaseModel):
    status: Literal["success"] = "success"
    data: list[Joke]


class ErrorResponse(BaseModel):
    status: Literal["error"] = "error"
    message: str
    details: str | None = None
