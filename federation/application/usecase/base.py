"""Base use case."""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from pydantic import BaseModel

RequestT = TypeVar("RequestT", bound=BaseModel)
ResponseT = TypeVar("ResponseT", bound=BaseModel)


class BaseUseCase(ABC, Generic[RequestT, ResponseT]):
    """One request model in, one response model out.

    Use cases sequence domain services; HTTP and storage details stay in
    the interface and persistence layers.
    """

    @abstractmethod
    async def execute(self, request: RequestT) -> ResponseT:
        """Run the use case for a request."""
