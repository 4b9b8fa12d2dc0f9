import json
from functools import lru_cache
from pathlib import Path

from .base import LocationDirectory
from ..config import settings
from ..schemas import City, Country, Subdivision


class StaticLocationDirectory(LocationDirectory):
    """Country / subdivision / locality lookup backed by a JSON file.

    Lookups are pure: unknown codes give empty lists, never errors.
    """

    def __init__(self, data: dict):
        self._countries: list[Country] = []
        self._states: dict[str, list[Subdivision]] = {}
        self._cities: dict[tuple[str, str], list[City]] = {}
        for c in data.get("countries", []):
            code = c["code"]
            self._countries.append(Country(code=code, name=c["name"]))
            subs = []
            for s in c.get("states", []):
                subs.append(Subdivision(code=s["code"], name=s["name"]))
                self._cities[(code, s["code"])] = [City(name=n) for n in s.get("cities", [])]
            self._states[code] = subs
        self._countries.sort(key=lambda x: x.name)

    @classmethod
    def from_file(cls, path: str | Path) -> "StaticLocationDirectory":
        with open(path, encoding="utf-8") as fh:
            return cls(json.load(fh))

    def countries(self) -> list[Country]:
        return list(self._countries)

    def states(self, country: str) -> list[Subdivision]:
        if not country:
            return []
        return list(self._states.get(country, []))

    def cities(self, country: str, state: str) -> list[City]:
        if not country or not state:
            return []
        return list(self._cities.get((country, state), []))

    def country_name(self, code: str) -> str:
        for c in self._countries:
            if c.code == code:
                return c.name
        return code


@lru_cache
def get_directory() -> StaticLocationDirectory:
    return StaticLocationDirectory.from_file(settings.LOCATIONS_FILE)
