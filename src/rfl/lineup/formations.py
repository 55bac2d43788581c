from __future__ import annotations

from typing import Iterable, Mapping

from rfl.contracts import Formation, Position

POSITION_BY_SLOT: dict[int, Position] = {
    0: Position.GK,
    1: Position.DEF,
    2: Position.DEF,
    3: Position.MID,
    4: Position.MID,
    5: Position.MID,
    6: Position.FWD,
}

FORMATIONS: tuple[Formation, ...] = (
    Formation("2-3-1", "2-3-1", ((0,), (1, 2), (3, 4, 5), (6,))),
    Formation("2-2-2", "2-2-2", ((0,), (1, 2), (3, 4), (5, 6))),
    Formation("3-2-1", "3-2-1", ((0,), (1, 2, 3), (4, 5), (6,))),
)

_BY_ID = {formation.formation_id: formation for formation in FORMATIONS}


def formation_ids() -> list[str]:
    return [formation.formation_id for formation in FORMATIONS]


def get_formation(formation_id: str | None) -> Formation | None:
    """Unknown ids mean "no current formation"; callers treat None as absence."""
    if formation_id is None:
        return None
    return _BY_ID.get(formation_id)


def required_position(slot: int) -> Position | None:
    return POSITION_BY_SLOT.get(slot)


def validate_catalog(
    formations: Iterable[Formation] = FORMATIONS,
    position_map: Mapping[int, Position] = POSITION_BY_SLOT,
) -> list[str]:
    issues: list[str] = []
    seen_ids: set[str] = set()
    for formation in formations:
        if formation.formation_id in seen_ids:
            issues.append(f"duplicate formation id '{formation.formation_id}'")
        seen_ids.add(formation.formation_id)
        slots = formation.slots
        if len(slots) != len(set(slots)):
            issues.append(f"formation '{formation.formation_id}' repeats a slot index")
        for slot in slots:
            if slot not in position_map:
                issues.append(f"formation '{formation.formation_id}' references unmapped slot {slot}")
    return issues
