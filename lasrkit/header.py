"""Summary information about a point cloud file."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from .schema import Attribute, AttributeSchema

# Seconds between the GPS epoch (1980-01-06) and the Unix epoch (1970-01-01).
_GPS_TO_UNIX_OFFSET = 315964800
# Adjusted standard GPS time is GPS time minus one billion seconds.
_ADJUSTED_GPS_OFFSET = 1_000_000_000


@dataclass
class Header:
    """Bounding box, scaling, point count and point layout of a point cloud."""

    signature: str = ""
    max_x: float = 0.0
    min_x: float = 0.0
    max_y: float = 0.0
    min_y: float = 0.0
    max_z: float = 0.0
    min_z: float = 0.0
    spatial_index: bool = False
    number_of_point_records: int = 0
    schema: AttributeSchema = field(default_factory=AttributeSchema)
    crs: Any = None
    x_scale_factor: float = 1.0
    y_scale_factor: float = 1.0
    z_scale_factor: float = 1.0
    x_offset: float = 0.0
    y_offset: float = 0.0
    z_offset: float = 0.0
    gpstime: float = 0.0
    file_creation_year: int = 0
    file_creation_day: int = 0
    adjusted_standard_gps_time: bool = False

    def add_attribute(self, attribute: Attribute) -> Attribute:
        """Append an attribute to the point layout and return the stored copy."""
        return self.schema.add_attribute(attribute)

    def gpstime_date(self) -> tuple[int, int]:
        """Return (year, zero-based day of year) of the first point's GPS time.

        Only adjusted standard GPS time can be dated; otherwise (0, 0) is returned.
        """
        if self.gpstime == 0 or not self.adjusted_standard_gps_time:
            return 0, 0
        seconds = int(self.gpstime) + _ADJUSTED_GPS_OFFSET + _GPS_TO_UNIX_OFFSET
        moment = datetime.fromtimestamp(seconds, tz=timezone.utc)
        return moment.year, moment.timetuple().tm_yday - 1

    def describe(self) -> str:
        """Return a human-readable multi-line summary."""
        lines = [
            f"Max Coordinates: ({self.max_x:.2f}, {self.max_y:.2f}, {self.max_z:.2f})",
            f"Min Coordinates: ({self.min_x:.2f}, {self.min_y:.2f}, {self.min_z:.2f})",
            f"Scale Factors: ({self.x_scale_factor:.2f}, {self.y_scale_factor:.2f}, {self.z_scale_factor:.2f})",
            f"Offsets: ({self.x_offset:.2f}, {self.y_offset:.2f}, {self.z_offset:.2f})",
            f"GPS Time: {self.gpstime:.2f}",
            f"File Creation Year: {self.file_creation_year}",
            f"File Creation Day: {self.file_creation_day}",
            f"Adjusted Standard GPS Time: {'true' if self.adjusted_standard_gps_time else 'false'}",
            f"Spatial Index: {'true' if self.spatial_index else 'false'}",
            f"Number of Point Records: {self.number_of_point_records}",
        ]
        schema_text = self.schema.describe(True)
        if schema_text:
            lines.append(schema_text)
        if self.crs is not None:
            lines.append(f"CRS: {self.crs}")
        return "\n".join(lines)