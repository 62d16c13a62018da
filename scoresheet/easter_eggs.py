"""Detection of unusual bench compositions worth a special notice."""

from typing import Optional

from scoresheet import MEDICAL_ROLE, ParsedGameSheet

AC3 = 'ac3'
MULTIPLE_DOCTORS = 'multiple_doctors'

AC3_ROLE = 'AC3'
MIN_DOCTORS = 2


def detect_easter_egg(sheet: ParsedGameSheet) -> Optional[str]:
    """Return the notice key for a parsed sheet, or None.

    A third assistant coach on either bench wins over a team with two or
    more medical officials.
    """
    if not isinstance(sheet, ParsedGameSheet):
        return None

    teams = (sheet.team_a, sheet.team_b)
    if any(o.role == AC3_ROLE for team in teams for o in team.officials):
        return AC3
    for team in teams:
        if sum(1 for o in team.officials if o.role == MEDICAL_ROLE) >= MIN_DOCTORS:
            return MULTIPLE_DOCTORS
    return None
