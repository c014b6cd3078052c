from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import List, Optional, Tuple


@dataclass(frozen=True)
class Post:
    """An article from the ``posts`` content collection."""

    title: str
    description: str
    pub_date: date
    slug: str
    body: str = ""
    image: Optional[str] = None
    partner: Optional[str] = None
    source: Optional[str] = None
    path: Optional[Path] = None


@dataclass(frozen=True)
class Talk:
    title: str
    description: str
    type: str
    image: str
    slug: str
    events: Tuple[str, ...] = ()
    body: str = ""
    path: Optional[Path] = None


@dataclass(frozen=True)
class Event:
    id: str
    name: str
    year: int
    location: str


@dataclass(frozen=True)
class Hardware:
    id: str
    title: str
    spec: str
    description: str


@dataclass(frozen=True)
class Service:
    id: str
    title: str
    description: str


@dataclass(frozen=True)
class Software:
    id: str
    title: str
    description: str


@dataclass(frozen=True)
class Sponsor:
    id: str
    name: str
    logo: str
    website: str


@dataclass(frozen=True)
class Testimonial:
    id: str
    name: str
    role: str
    company: str
    avatar: str
    content: str


@dataclass(frozen=True)
class Issue:
    """A single problem found while linting a content file."""

    path: Path
    field: str
    message: str
    severity: str = "error"

    def __str__(self) -> str:
        return f"{self.path}: {self.field}: {self.message}"


@dataclass
class SiteContent:
    """Every collection found under a content directory."""

    posts: List[Post] = field(default_factory=list)
    talks: List[Talk] = field(default_factory=list)
    events: List[Event] = field(default_factory=list)
    hardware: List[Hardware] = field(default_factory=list)
    services: List[Service] = field(default_factory=list)
    software: List[Software] = field(default_factory=list)
    sponsors: List[Sponsor] = field(default_factory=list)
    testimonials: List[Testimonial] = field(default_factory=list)
