"""Test container builder with selective unmocking."""

from dishka import AsyncContainer, Provider, make_async_container

from interspace.util.di import PROVIDERS, Component, get_provider


def build_test_container(
    unmock: set[Component] | None = None, *extra: Provider
) -> AsyncContainer:
    """Build test container with selective unmocking.

    Settings are loaded from environment variables.

    Args:
        unmock: Components to use production implementations for.
                All others use mocks.
        *extra: Additional providers, e.g. FastapiProvider for API tests

    Returns:
        Configured test container

    Raises:
        ValueError: If unmock names an unknown component

    Examples:
        # Unit tests - all mocks
        container = build_test_container()

        # Integration tests - real persistence, assumes postgres running
        container = build_test_container(unmock={"persistence"})
    """
    unmock = unmock or set()
    components = {
        base.__mock_component__ for base in PROVIDERS if base.__mock_component__
    }
    unknown = unmock - components
    if unknown:
        raise ValueError(f"Unknown components: {sorted(unknown)}")

    provider_instances = []
    for base in PROVIDERS:
        component = base.__mock_component__
        use_mock = component is not None and component not in unmock
        provider_instances.append(get_provider(base, use_mock=use_mock)())

    return make_async_container(*provider_instances, *extra)
