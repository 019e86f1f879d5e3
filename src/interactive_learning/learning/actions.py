"""Named actions accepted by the learning flow controller."""

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from interactive_learning.games.levels import GameKind
from interactive_learning.learning.content import Activity
from interactive_learning.models.chat import ChatTab


class _Action(BaseModel):
    model_config = ConfigDict(frozen=True)


class ContinueLearning(_Action):
    type: Literal["continue_learning"] = "continue_learning"


class ResetProfile(_Action):
    type: Literal["reset_profile"] = "reset_profile"


class SetInput(_Action):
    """Replace the text of the field the current step collects."""

    type: Literal["set_input"] = "set_input"
    value: str


class Next(_Action):
    type: Literal["next"] = "next"


class Back(_Action):
    type: Literal["back"] = "back"


class Edit(_Action):
    type: Literal["edit"] = "edit"


class Confirm(_Action):
    type: Literal["confirm"] = "confirm"


class StartLearning(_Action):
    type: Literal["start_learning"] = "start_learning"


class SelectActivity(_Action):
    type: Literal["select_activity"] = "select_activity"
    activity: Activity


class NextPage(_Action):
    type: Literal["next_page"] = "next_page"


class PreviousPage(_Action):
    type: Literal["previous_page"] = "previous_page"


class StartQuiz(_Action):
    type: Literal["start_quiz"] = "start_quiz"


class SelectOption(_Action):
    type: Literal["select_option"] = "select_option"
    option: str


class ConfirmAnswer(_Action):
    type: Literal["confirm_answer"] = "confirm_answer"


class TryAgain(_Action):
    type: Literal["try_again"] = "try_again"


class GoHome(_Action):
    type: Literal["go_home"] = "go_home"


class StartProject(_Action):
    type: Literal["start_project"] = "start_project"


class CompleteProject(_Action):
    type: Literal["complete_project"] = "complete_project"


class SelectTab(_Action):
    type: Literal["select_tab"] = "select_tab"
    tab: ChatTab


class Dismiss(_Action):
    type: Literal["dismiss"] = "dismiss"


class LaunchGame(_Action):
    type: Literal["launch_game"] = "launch_game"
    game: GameKind


class LeaveGame(_Action):
    type: Literal["leave_game"] = "leave_game"


FlowAction = Annotated[
    ContinueLearning
    | ResetProfile
    | SetInput
    | Next
    | Back
    | Edit
    | Confirm
    | StartLearning
    | SelectActivity
    | NextPage
    | PreviousPage
    | StartQuiz
    | SelectOption
    | ConfirmAnswer
    | TryAgain
    | GoHome
    | StartProject
    | CompleteProject
    | SelectTab
    | Dismiss
    | LaunchGame
    | LeaveGame,
    Field(discriminator="type"),
]

flow_action_adapter: TypeAdapter[FlowAction] = TypeAdapter(FlowAction)


def parse_action(data: dict) -> FlowAction:
    """Build a typed action from a ``{"type": ...}`` message."""
    return flow_action_adapter.validate_python(data)
