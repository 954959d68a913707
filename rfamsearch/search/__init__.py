from rfamsearch.search.client_base import BaseSearchClient
from rfamsearch.search.factory import SearchClientFactory
from rfamsearch.search.rfam_client_adapter import RfamClientAdapter

__all__ = ["BaseSearchClient", "RfamClientAdapter", "SearchClientFactory"]
