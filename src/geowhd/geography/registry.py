"""
Office Registry

A single flat namespace of district and regional office names. Misses are
reported with the closest registered name; they are never auto-corrected.
"""
from typing import Dict, Iterable, List, NamedTuple, Optional, Tuple, Union

from rapidfuzz.distance import Levenshtein

from geowhd.exceptions import DataIntegrityError, ResolutionError
from geowhd.geography.builder import Geography
from geowhd.geography.models import DistrictOffice, Office, OfficeKind, RegionalOffice


class OfficeNames(NamedTuple):
    regional_offices: List[str]
    district_offices: List[str]


def classify_office_name(name: str) -> Optional[OfficeKind]:
    """Name-pattern fallback for office lists that carry no kind tag"""
    if 'Region' in name:
        return OfficeKind.REGIONAL
    if 'District' in name:
        return OfficeKind.DISTRICT
    return None


def partition_office_names(names: Iterable[str]) -> OfficeNames:
    """Split untyped names into (regional, district) by naming convention"""
    names = list(names)
    return OfficeNames(
        regional_offices=sorted(n for n in names if classify_office_name(n) == OfficeKind.REGIONAL),
        district_offices=sorted(n for n in names if classify_office_name(n) == OfficeKind.DISTRICT),
    )


def nearest_name(name: str, candidates: Iterable[str]) -> Optional[str]:
    """
    Candidate with the smallest Levenshtein distance to name

    Ties go to the lexicographically first candidate.
    """
    best: Optional[Tuple[int, str]] = None
    for candidate in candidates:
        key = (Levenshtein.distance(name, candidate), candidate)
        if best is None or key < best:
            best = key
    return best[1] if best else None


class OfficeRegistry:
    """Name -> office lookup across both office kinds"""

    def __init__(self, offices: Iterable[Office]):
        self._offices: Dict[str, Office] = {}
        for office in offices:
            existing = self._offices.get(office.name)
            if existing is not None and existing is not office:
                raise DataIntegrityError(f"Office name {office.name!r} is registered twice")
            self._offices[office.name] = office

    @classmethod
    def from_geography(cls, geography: Geography) -> "OfficeRegistry":
        return cls(list(geography.regional_offices.values()) + list(geography.district_offices.values()))

    def __contains__(self, name: str) -> bool:
        return name in self._offices

    def __len__(self) -> int:
        return len(self._offices)

    def names(self) -> List[str]:
        return sorted(self._offices)

    def lookup(self, name: str) -> Optional[Office]:
        """Exact lookup; None on a miss"""
        return self._offices.get(name)

    def suggest(self, name: str) -> Optional[str]:
        return nearest_name(name, sorted(self._offices))

    def resolve(self, office: Union[str, Office]) -> Office:
        """
        Resolve an office name (or pass an office entity through)

        Raises:
            ResolutionError: name is not registered; carries the nearest name
        """
        if isinstance(office, (DistrictOffice, RegionalOffice)):
            return office
        found = self.lookup(office)
        if found is None:
            raise ResolutionError(office, self.suggest(office))
        return found

    def list_offices(self) -> OfficeNames:
        return OfficeNames(
            regional_offices=sorted(n for n, o in self._offices.items() if o.kind == OfficeKind.REGIONAL),
            district_offices=sorted(n for n, o in self._offices.items() if o.kind == OfficeKind.DISTRICT),
        )
