from __future__ import annotations

from typing import Dict

from .models import Action, ActionMenu, PlayerSeat


class Collaborator:
    """I/O side of a table: supplies decisions and renders engine events.

    ``request_action`` blocks until the seat has decided. The engine
    re-validates whatever comes back, so a collaborator may return an illegal
    action; it will simply be asked again.
    """

    def request_action(self, seat: PlayerSeat, menu: ActionMenu) -> Action:
        raise NotImplementedError

    def notify(self, event: Dict[str, object]) -> None:
        pass
