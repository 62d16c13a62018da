"""Warning texts shared by the scoresheet parsers."""

from scoresheet import ParsedTeam

NO_TEXT_WARNING = 'No OCR text provided'
NO_LINES_WARNING = 'OCR text contains no lines'
NO_PLAYERS_WARNING = 'No players found for Team {team}'
NO_OFFICIALS_WARNING = (
    'No officials (coaches) found - the {section} section may not have been recognized'
)


def missing_roster_warnings(
    team_a: ParsedTeam,
    team_b: ParsedTeam,
    officials_section: str = 'officials',
) -> list[str]:
    """Build the warnings for teams without players or officials.

    Args:
        team_a: Parsed first team.
        team_b: Parsed second team.
        officials_section: Name of the officials section on this sheet layout.

    Returns:
        List of warning messages (may be empty).
    """
    warnings: list[str] = []
    if not team_a.players:
        warnings.append(NO_PLAYERS_WARNING.format(team='A'))
    if not team_b.players:
        warnings.append(NO_PLAYERS_WARNING.format(team='B'))
    if not team_a.officials and not team_b.officials:
        warnings.append(NO_OFFICIALS_WARNING.format(section=officials_section))
    return warnings
