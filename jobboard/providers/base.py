from typing import Protocol

from ..schemas import City, Country, JobOut, ResultPage, Subdivision


class SearchQuery(dict):
    # term, job_type, country, state, owner_id, page_size, page_number
    pass


class LocationDirectory(Protocol):
    def countries(self) -> list[Country]:
        ...

    def states(self, country: str) -> list[Subdivision]:
        ...

    def cities(self, country: str, state: str) -> list[City]:
        ...

    def country_name(self, code: str) -> str:
        ...


class IdentityProvider(Protocol):
    async def current_principal(self) -> str | None:
        ...


class ListingBackend(Protocol):
    async def search(self, query: SearchQuery) -> ResultPage:
        ...

    async def get(self, listing_id: str) -> JobOut:
        ...

    async def delete(self, listing_id: str) -> None:
        ...
