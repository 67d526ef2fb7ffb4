"""Garment attributes extracted from an outfit photo."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Mapping, Sequence


class _TagEnum(str, Enum):
    """String enum with lenient parsing of model and form input."""

    @classmethod
    def parse(cls, raw: object):
        """Return the member matching ``raw`` ignoring case and surrounding blanks."""

        if isinstance(raw, cls):
            return raw
        if not isinstance(raw, str):
            raise ValueError(f"{cls.__name__} expects a string, got {raw!r}")
        try:
            return cls(raw.strip().lower())
        except ValueError as exc:
            allowed = ", ".join(member.value for member in cls)
            raise ValueError(f"Unknown {cls.__name__.lower()} {raw!r}; expected one of: {allowed}") from exc


class Pattern(_TagEnum):
    """Surface pattern of a garment."""

    SOLID = "solid"
    STRIPED = "striped"
    CHECKED = "checked"
    FLORAL = "floral"
    DOT = "dot"
    GEOMETRIC = "geometric"


class Style(_TagEnum):
    """Overall style family of a garment."""

    CASUAL = "casual"
    FORMAL = "formal"
    SPORTY = "sporty"
    VINTAGE = "vintage"
    MINIMAL = "minimal"


class Season(_TagEnum):
    """Season the outfit is suited for."""

    SPRING = "spring"
    SUMMER = "summer"
    FALL = "fall"
    WINTER = "winter"


TPO_TIMES = ("morning", "afternoon", "evening", "night")
TPO_PLACES = ("office", "school", "cafe", "restaurant", "party", "outdoor", "casual")
TPO_OCCASIONS = ("daily", "business", "date", "formal", "casual", "sport")


@dataclass(frozen=True, slots=True)
class TPOContext:
    """Time, place and occasion the outfit is worn for."""

    time: str
    place: str
    occasion: str

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any] | None) -> TPOContext | None:
        """Build a context only when all three fields are present and non-blank."""

        if not payload:
            return None
        values = []
        for key in ("time", "place", "occasion"):
            value = payload.get(key)
            if not isinstance(value, str) or not value.strip():
                return None
            values.append(value.strip().lower())
        return cls(*values)

    def as_dict(self) -> dict[str, str]:
        return {"time": self.time, "place": self.place, "occasion": self.occasion}


def _normalise_texture(value: str | None) -> str | None:
    if value is None:
        return None
    cleaned = value.strip().lower()
    return cleaned or None


@dataclass(frozen=True, slots=True)
class AttributeSet:
    """Immutable description of one analysed outfit.

    Colour sequences are ordered by prominence; the first entry of each is the
    dominant colour of that garment.
    """

    top_colors: tuple[str, ...]
    bottom_colors: tuple[str, ...]
    top_pattern: Pattern
    bottom_pattern: Pattern
    top_style: Style
    bottom_style: Style
    top_texture: str | None = None
    bottom_texture: str | None = None
    season: Season | None = None
    tpo: TPOContext | None = None

    def __post_init__(self) -> None:
        # frozen dataclass: normalise through object.__setattr__
        object.__setattr__(self, "top_colors", tuple(self.top_colors))
        object.__setattr__(self, "bottom_colors", tuple(self.bottom_colors))
        if not self.top_colors or not self.bottom_colors:
            raise ValueError("Both garments need at least one colour.")
        object.__setattr__(self, "top_pattern", Pattern.parse(self.top_pattern))
        object.__setattr__(self, "bottom_pattern", Pattern.parse(self.bottom_pattern))
        object.__setattr__(self, "top_style", Style.parse(self.top_style))
        object.__setattr__(self, "bottom_style", Style.parse(self.bottom_style))
        object.__setattr__(self, "top_texture", _normalise_texture(self.top_texture))
        object.__setattr__(self, "bottom_texture", _normalise_texture(self.bottom_texture))
        if self.season is not None:
            object.__setattr__(self, "season", Season.parse(self.season))

    @property
    def dominant_top(self) -> str:
        return self.top_colors[0]

    @property
    def dominant_bottom(self) -> str:
        return self.bottom_colors[0]

    @property
    def styles(self) -> tuple[Style, Style]:
        return self.top_style, self.bottom_style

    def with_tpo(self, tpo: TPOContext | None) -> AttributeSet:
        """Return a copy bound to a different situational context."""

        return replace(self, tpo=tpo)

    def as_dict(self) -> dict[str, Any]:
        """Serialise with the camelCase keys used on the wire."""

        return {
            "topColors": list(self.top_colors),
            "bottomColors": list(self.bottom_colors),
            "topPattern": self.top_pattern.value,
            "bottomPattern": self.bottom_pattern.value,
            "topStyle": self.top_style.value,
            "bottomStyle": self.bottom_style.value,
            "topTexture": self.top_texture,
            "bottomTexture": self.bottom_texture,
            "season": self.season.value if self.season else None,
            "tpo": self.tpo.as_dict() if self.tpo else None,
        }


def colors_from(values: Sequence[str]) -> tuple[str, ...]:
    """Strip blanks from a colour list returned by the model."""

    return tuple(value.strip() for value in values if isinstance(value, str) and value.strip())
