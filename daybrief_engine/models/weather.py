from pydantic import BaseModel


class WeatherRow(BaseModel):
    """One rendered hour of the forecast. Values are display-ready strings."""

    model_config = {"frozen": True, "extra": "ignore"}

    time: str
    temperature: str
    description: str = ""
    feels_like: str = ""
    precipitation: str = ""
    icon: str = ""


class ForecastResult(BaseModel):
    model_config = {"frozen": True}

    label: str
    rows: tuple[WeatherRow, ...]
