"""
Person / activity records of a synthetic population.

Records are immutable once generated. `to_record` / `from_record` convert to and
from the JSON layout consumed by the map front-end (camelCase keys, "HH:MM" times).
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from popsim.population.timeutils import to_minutes


HOME = "home"
WORK = "work"
SCHOOL = "school"
LEISURE = "leisure"
ACTIVITY_KINDS = (HOME, WORK, SCHOOL, LEISURE)

WALK = "walk"
BIKE = "bike"
PERSONAL_CAR = "personal-car"
PUBLIC_TRANSPORT = "public-transport"
TAXI = "taxi"
RIDE_HAIL = "ride-hail"
TRANSPORT_MODES = (WALK, BIKE, PERSONAL_CAR, PUBLIC_TRANSPORT, TAXI, RIDE_HAIL)

MALE = "male"
FEMALE = "female"
SEXES = (MALE, FEMALE)

# Inclusive (min, max) ages; None means no upper bound.
AGE_BANDS: Dict[str, Tuple[int, Optional[int]]] = {
    "0-17": (0, 17),
    "18-25": (18, 25),
    "26-34": (26, 34),
    "35-64": (35, 64),
    "65+": (65, None),
}
ALL = "all"


def age_band_of(age: int) -> str:
    for band, (low, high) in AGE_BANDS.items():
        if age >= low and (high is None or age <= high):
            return band
    raise ValueError(f"Age must be non-negative, got {age}")


@dataclass(frozen=True)
class Coordinates:
    lat: float
    lng: float

    def to_record(self) -> Dict[str, float]:
        return {"lat": self.lat, "lng": self.lng}


@dataclass(frozen=True)
class Activity:
    """
    One stay of a daily chain.

    Attributes:
        kind: One of ACTIVITY_KINDS
        start_time: Wall-clock start "HH:MM"
        end_time: Wall-clock end "HH:MM"; earlier than start_time when the stay spans midnight
        zone: Name of the catalog zone holding the stay
        coordinates: Point inside that zone
        transport: Mode of the leg leading here, None for the first activity of the day
    """
    kind: str
    start_time: str
    end_time: str
    zone: str
    coordinates: Coordinates
    transport: Optional[str] = None

    @property
    def start_minutes(self) -> int:
        return to_minutes(self.start_time)

    @property
    def end_minutes(self) -> int:
        return to_minutes(self.end_time)

    @property
    def spans_midnight(self) -> bool:
        return self.end_minutes < self.start_minutes

    def to_record(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "zoneName": self.zone,
            "coordinates": self.coordinates.to_record(),
            "transport": self.transport,
        }

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Activity":
        coords = record["coordinates"]
        return cls(
            kind=record.get("kind", record.get("name")),
            start_time=record["startTime"],
            end_time=record["endTime"],
            zone=record.get("zoneName", record.get("zone")),
            coordinates=Coordinates(float(coords["lat"]), float(coords["lng"])),
            transport=record.get("transport"),
        )


@dataclass(frozen=True)
class Person:
    id: int
    age: int
    sex: str
    first_name: str = ""
    last_name: str = ""
    activities: Tuple[Activity, ...] = field(default_factory=tuple)

    def home_activities(self) -> List[Activity]:
        return [a for a in self.activities if a.kind == HOME]

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "age": self.age,
            "sex": self.sex,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "activities": [a.to_record() for a in self.activities],
        }

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Person":
        return cls(
            id=int(record["id"]),
            age=int(record["age"]),
            sex=record.get("sex", FEMALE),
            first_name=record.get("firstName", ""),
            last_name=record.get("lastName", ""),
            activities=tuple(Activity.from_record(a) for a in record.get("activities", [])),
        )
