from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import Role


@dataclass(frozen=True)
class NavigationShell:
    """Screens reachable from one role's home, in drawer order."""

    route: str
    screens: tuple[str, ...]

    @property
    def initial_screen(self) -> str:
        return self.screens[0]

    def has_screen(self, name: str) -> bool:
        return name in self.screens


SHELLS = {
    Role.ADMIN: NavigationShell(route="Admin", screens=("Dashboard", "ManageUsers", "ViewLogs")),
    Role.INSTRUCTOR: NavigationShell(
        route="Instructor",
        screens=("Dashboard", "AttendanceManager", "ClassList", "TakeAttendance", "AboutApp", "HelpSupport"),
    ),
    Role.STUDENT: NavigationShell(
        route="Student",
        screens=("Dashboard", "Schedule", "QRScanner", "Records", "History", "Location", "EditProfile", "AboutApp"),
    ),
}


def shell_for(role) -> NavigationShell:
    try:
        return SHELLS[Role(role)]
    except ValueError:
        raise ValueError(f"Unknown role: {role!r}")


def route_for(role) -> str:
    """Root route a signed-in user lands on."""

    return shell_for(role).route
