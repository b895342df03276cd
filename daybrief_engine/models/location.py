from pydantic import BaseModel


class Location(BaseModel):
    name: str
    latitude: float
    longitude: float
    country: str = ""
    admin1: str = ""

    @property
    def label(self) -> str:
        """Display label: name, name (country) or name — region, country."""
        if not self.country:
            return self.name
        if not self.admin1:
            return f"{self.name} ({self.country})"
        return f"{self.name} — {self.admin1}, {self.country}"
