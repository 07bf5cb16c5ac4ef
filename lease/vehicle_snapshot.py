"""VehicleSnapshot class for telemetry read from the car."""

from typing import Optional


def to_fahrenheit(celsius: Optional[float]) -> Optional[int]:
    """Convert Celsius to whole degrees Fahrenheit."""
    if celsius is None:
        return None
    return round(celsius * 9 / 5 + 32)


class VehicleSnapshot:
    """Current odometer plus the companion telemetry shown next to it."""

    def __init__(
            self,
            name: str,
            vin: Optional[str],
            odometer: float,
            battery_level: Optional[float] = None,
            charging_state: str = "Disconnected",
            ideal_range: Optional[float] = None,
            is_locked: Optional[bool] = None,
            sentry_mode: Optional[bool] = None,
            latitude: Optional[float] = None,
            longitude: Optional[float] = None,
            state: Optional[str] = None,
            outside_temp: Optional[float] = None,
            inside_temp: Optional[float] = None,
    ):
        self.name = name
        self.vin = vin
        self.odometer = odometer
        self.battery_level = battery_level
        self.charging_state = charging_state
        self.ideal_range = ideal_range
        self.is_locked = is_locked
        self.sentry_mode = sentry_mode
        self.latitude = latitude
        self.longitude = longitude
        self.state = state
        self.outside_temp = outside_temp
        self.inside_temp = inside_temp

    @property
    def masked_vin(self) -> str:
        """VIN shortened to first three and last four characters."""
        if not self.vin:
            return "N/A"
        return f"{self.vin[:3]}...{self.vin[-4:]}"

    @property
    def is_charging(self) -> bool:
        return self.charging_state == "Charging"

    @property
    def has_location(self) -> bool:
        return bool(self.latitude) and bool(self.longitude)

    @property
    def outside_temp_f(self) -> Optional[int]:
        return to_fahrenheit(self.outside_temp)

    @property
    def inside_temp_f(self) -> Optional[int]:
        return to_fahrenheit(self.inside_temp)
