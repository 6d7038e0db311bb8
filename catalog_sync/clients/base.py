from abc import ABC, abstractmethod

import requests


class BaseClient(ABC):
    @abstractmethod
    def make_session(self, config) -> requests.Session:
        """Create and configure an HTTP session with auth headers."""

    @abstractmethod
    def fetch_products(self, config) -> list:
        """Fetch the remote product list for the given config."""
