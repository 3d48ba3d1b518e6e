"""Test container with per-component mocking."""

from dishka import AsyncContainer, Provider, make_async_container

from federation.util.di import PROVIDERS, Component, get_provider


def mockable_components() -> set[str]:
    """Names of the components that have a mock implementation."""
    return {
        base.__mock_component__
        for base in PROVIDERS
        if base.__mock_component__ and base.__subclasses__()
    }


def build_test_container(
    unmock: set[Component] | None = None,
    extra_providers: list[Provider] | None = None,
) -> AsyncContainer:
    """Build a container where every mockable component is mocked.

    Args:
        unmock: Components to wire with their production implementation
        extra_providers: Appended after the registry; later providers win,
            so these can also replace a component (e.g. FastapiProvider for
            e2e tests, or a session store the test controls)

    Raises:
        ValueError: If ``unmock`` names an unknown component
    """
    unmock = unmock or set()
    unknown = unmock - mockable_components()
    if unknown:
        raise ValueError(f"Unknown components: {unknown}")

    providers = []
    for base in PROVIDERS:
        component = base.__mock_component__
        use_mock = bool(component) and component not in unmock
        providers.append(get_provider(base, use_mock=use_mock)())

    return make_async_container(*providers, *(extra_providers or []))
