"""Location lookup schema definitions."""

from pydantic import BaseModel, ConfigDict


class Location(BaseModel):
    """A location record returned by a freegeoip-compatible service."""

    model_config = ConfigDict(extra="ignore")

    ip: str | None = None
    city: str | None = None
    region_name: str | None = None
    country_name: str | None = None
    country_code: str | None = None

    def describe(self) -> str:
        """Render the location as ``near {city}, {state}``.

        US locations use the region (state) name, everywhere else the country name.
        Parts that are missing are left out; an empty string means nothing useful
        is known.
        """
        state = self.region_name if self.country_code == "US" else self.country_name
        parts = [part for part in (self.city, state) if part]
        if not parts:
            return ""
        return f"near {', '.join(parts)}"
