from __future__ import annotations

from dataclasses import dataclass, field

from .providers.base import LocationDirectory
from .providers.locations import get_directory
from .schemas import City, Country, JobIn, JobOut, Subdivision


@dataclass
class ListingForm:
    """Create/edit form for a listing with cascading location selectors."""

    title: str = ""
    company_name: str = ""
    description: str = ""
    job_type: str = ""
    location_country: str = ""
    location_state: str = ""
    location_city: str = ""
    id: str | None = None
    locations: LocationDirectory = field(default_factory=get_directory, repr=False, compare=False)

    @classmethod
    def from_listing(cls, job: JobOut, locations: LocationDirectory | None = None) -> "ListingForm":
        form = cls(
            title=job.title,
            company_name=job.company_name,
            description=job.description,
            job_type=job.job_type,
            location_country=job.location_country,
            location_state=job.location_state,
            location_city=job.location_city,
            id=job.id,
        )
        if locations is not None:
            form.locations = locations
        return form

    def set_country(self, code: str) -> None:
        self.location_country = code
        self.location_state = ""
        self.location_city = ""

    def set_state(self, code: str) -> None:
        self.location_state = code if self.location_country else ""
        self.location_city = ""

    def set_city(self, name: str) -> None:
        self.location_city = name if self.location_state else ""

    @property
    def countries(self) -> list[Country]:
        return self.locations.countries()

    @property
    def states(self) -> list[Subdivision]:
        return self.locations.states(self.location_country)

    @property
    def cities(self) -> list[City]:
        return self.locations.cities(self.location_country, self.location_state)

    def to_payload(self) -> JobIn:
        return JobIn(
            title=self.title,
            company_name=self.company_name,
            description=self.description,
            job_type=self.job_type,
            location_country=self.location_country,
            location_state=self.location_state,
            location_city=self.location_city,
        )
