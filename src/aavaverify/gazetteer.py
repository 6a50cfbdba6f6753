"""Built-in reference addresses used for matching when offline."""

from aavaverify import grid
from aavaverify.models import AddressParts, Coordinate, GazetteerEntry


def _entry(
    entry_id: str, display_name: str, parts: AddressParts, lat: float, lon: float
) -> GazetteerEntry:
    coordinate = Coordinate(lat, lon)
    return GazetteerEntry(
        id=entry_id,
        display_name=display_name,
        address_parts=parts,
        coordinate=coordinate,
        digipin=grid.encode(coordinate).digipin,
    )


ENTRIES: tuple[GazetteerEntry, ...] = (
    _entry(
        "1",
        "Connaught Place, New Delhi",
        AddressParts(
            house_no="Block A",
            street="Inner Circle",
            area="Connaught Place",
            district="New Delhi",
            pincode="110001",
        ),
        28.6315,
        77.2167,
    ),
    _entry(
        "2",
        "India Gate, New Delhi",
        AddressParts(
            street="Rajpath",
            area="India Gate",
            district="New Delhi",
            pincode="110001",
        ),
        28.6129,
        77.2295,
    ),
    _entry(
        "3",
        "Gateway of India, Mumbai",
        AddressParts(
            street="Apollo Bandar",
            area="Colaba",
            district="Mumbai",
            pincode="400001",
        ),
        18.922,
        72.8347,
    ),
)
