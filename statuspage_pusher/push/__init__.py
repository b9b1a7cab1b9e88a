"""Push side of the pusher: Statuspage client and outcome models."""

from .models import PushOutcome, PushStatus, StatusPageTarget
from .statuspage import StatusPagePusher, build_form, format_value

__all__ = [
    "PushOutcome",
    "PushStatus",
    "StatusPageTarget",
    "StatusPagePusher",
    "build_form",
    "format_value",
]
