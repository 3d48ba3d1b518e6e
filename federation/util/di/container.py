"""Composition root: the production DI container."""

from dishka import AsyncContainer, make_async_container
from dishka.integrations.fastapi import FastapiProvider, setup_dishka
from fastapi import FastAPI

from federation.util.di import PROVIDERS, get_provider


def create_container() -> AsyncContainer:
    """Wire every component with its real implementation.

    Nothing is connected until first use; settings come from the
    environment when ``Settings`` is first resolved.
    """
    providers = [get_provider(base, use_mock=False)() for base in PROVIDERS]
    return make_async_container(*providers, FastapiProvider())


def setup_di(app: FastAPI, container: AsyncContainer) -> None:
    """Attach the container to the app so routes can use FromDishka."""
    setup_dishka(container, app)
