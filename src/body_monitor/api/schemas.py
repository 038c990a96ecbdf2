"""Pydantic models for the body monitor API."""

from pydantic import BaseModel, Field

from body_monitor.services.notifications import FailureNotice
from body_monitor.services.series import chart_points
from body_monitor.services.sync import SyncView


class LoginRequest(BaseModel):
    """Sign-in payload."""

    account_id: str = Field(min_length=1)


class RecordPayload(BaseModel):
    """Body record as shown to the client."""

    age: int | None
    height: int | None
    weights: list[float]


class ChartPointPayload(BaseModel):
    """One labelled chart point."""

    sequence_index: int
    value: float
    tick_label: str
    tooltip: str


class NoticePayload(BaseModel):
    """A failure notification for the user."""

    kind: str
    message: str


class SessionPayload(BaseModel):
    """Render input for a signed-in session."""

    state: str
    account_id: str | None
    record: RecordPayload
    current_weight: float | None
    show_chart: bool
    series: list[ChartPointPayload]
    notices: list[NoticePayload]
    outcome: str | None = None


def session_payload(
    view: SyncView, notices: list[FailureNotice], outcome: str | None = None
) -> SessionPayload:
    """Build the response payload from a controller snapshot."""
    return SessionPayload(
        state=view.state.value,
        account_id=view.account_id,
        record=RecordPayload(
            age=view.record.age,
            height=view.record.height,
            weights=view.record.weights,
        ),
        current_weight=view.current_weight,
        show_chart=view.show_chart,
        series=[
            ChartPointPayload(
                sequence_index=point.sequence_index,
                value=point.value,
                tick_label=point.tick_label,
                tooltip=point.tooltip,
            )
            for point in chart_points(view.series)
        ],
        notices=[
            NoticePayload(kind=notice.kind.value, message=notice.message)
            for notice in notices
        ],
        outcome=outcome,
    )
