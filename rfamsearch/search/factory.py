from rfamsearch.config.settings import Settings
from rfamsearch.search.client_base import BaseSearchClient
from rfamsearch.search.example_client_adapter import ExampleClientAdapter
from rfamsearch.search.rfam_client_adapter import RfamClientAdapter


class SearchClientFactory:
    """Creates the configured search client adapter."""

    PROVIDERS: tuple[str, ...] = ("example", "rfam")

    @classmethod
    def create(cls, settings: Settings) -> BaseSearchClient:
        """Create a configured search client from application settings."""
        provider = settings.search_provider.lower()
        if provider == "example":
            return ExampleClientAdapter()
        if provider == "rfam":
            return RfamClientAdapter(
                search_url=settings.rfam_search_url,
                timeout_seconds=settings.request_timeout_seconds,
                max_connections=settings.max_connections,
            )
        raise ValueError(
            f"Unknown search provider '{provider}'. Choose from: {list(cls.PROVIDERS)}"
        )
