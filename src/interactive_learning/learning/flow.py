"""Learning flow state machine.

Drives the learner from onboarding through activity selection into a topic
module (intro walkthrough, quiz, results) and back home. The whole screen
state lives in one immutable :class:`FlowState`; actions from
:mod:`interactive_learning.learning.actions` are the only way to move it.
Actions that make no sense in the current stage leave the state unchanged.
"""

import random
from collections.abc import Callable
from enum import StrEnum

import structlog
from pydantic import BaseModel, ConfigDict, Field

from interactive_learning.games.levels import GameKind
from interactive_learning.i18n import translate
from interactive_learning.learning import actions as a
from interactive_learning.learning.content import (
    CUSTOM_PROJECT_RESULT_MESSAGES,
    SOLAR_INTRO,
    SOLAR_QUESTIONS,
    SOLAR_RESULT_MESSAGES,
    WIND_INTRO,
    WIND_QUESTIONS,
    WIND_RESULT_MESSAGES,
    Activity,
)
from interactive_learning.learning.quiz import QuizEngine, result_message
from interactive_learning.models.chat import ChatTab
from interactive_learning.models.quiz import QuizQuestion
from interactive_learning.models.user_profile import UserProfile
from interactive_learning.storage.profile_store import ProfileStore

logger = structlog.get_logger()

# Scores a finished custom project; receives the project name.
ScoreProvider = Callable[[str], int]


def random_project_score(project_name: str) -> int:
    """Placeholder project score until a model grades the guided session."""
    return random.randint(70, 100)


class Stage(StrEnum):
    HOME = "home"
    ONBOARDING = "onboarding"
    READY_TO_LEARN = "ready_to_learn"
    ACTIVITY_SELECTION = "activity_selection"
    SOLAR = "solar"
    WIND = "wind"
    CUSTOM_PROJECT = "custom_project"
    TALK_TO_ME = "talk_to_me"
    GAME = "game"


class OnboardingStep(StrEnum):
    LANGUAGE = "language"
    NAME = "name"
    TOPIC = "topic"
    MOTIVATION = "motivation"
    CONFIRMATION = "confirmation"


class ModuleStep(StrEnum):
    INTRO = "intro"
    QUIZ = "quiz"
    RESULTS = "results"


class ProjectStep(StrEnum):
    PROJECT_NAME = "project_name"
    GUIDED_LEARNING = "guided_learning"
    RESULTS = "results"


ONBOARDING_ORDER: list[OnboardingStep] = list(OnboardingStep)

# Onboarding step -> OnboardingInputs field it collects
ONBOARDING_FIELDS: dict[OnboardingStep, str] = {
    OnboardingStep.LANGUAGE: "language",
    OnboardingStep.NAME: "name",
    OnboardingStep.TOPIC: "favorite_topic",
    OnboardingStep.MOTIVATION: "motivation",
}


class TopicModule(BaseModel):
    """Content and score slot of a quiz-based module."""

    model_config = ConfigDict(frozen=True)

    intro: tuple[tuple[str, str], ...]
    questions: tuple[QuizQuestion, ...]
    result_messages: dict[int, str]
    score_field: str


DEFAULT_MODULES: dict[Stage, TopicModule] = {
    Stage.SOLAR: TopicModule(
        intro=tuple(SOLAR_INTRO),
        questions=tuple(SOLAR_QUESTIONS),
        result_messages=SOLAR_RESULT_MESSAGES,
        score_field="solar_score",
    ),
    Stage.WIND: TopicModule(
        intro=tuple(WIND_INTRO),
        questions=tuple(WIND_QUESTIONS),
        result_messages=WIND_RESULT_MESSAGES,
        score_field="wind_energy_score",
    ),
}

ACTIVITY_STAGES: dict[Activity, Stage] = {
    Activity.SOLAR: Stage.SOLAR,
    Activity.WIND: Stage.WIND,
    Activity.CUSTOM_PROJECT: Stage.CUSTOM_PROJECT,
    Activity.TALK_TO_ME: Stage.TALK_TO_ME,
}


class OnboardingInputs(BaseModel):
    """Answers typed during onboarding, kept until confirmed or reset."""

    model_config = ConfigDict(frozen=True)

    language: str = ""
    name: str = ""
    favorite_topic: str = ""
    motivation: str = ""

    @classmethod
    def from_profile(cls, profile: UserProfile) -> "OnboardingInputs":
        return cls(
            language=profile.language,
            name=profile.name,
            favorite_topic=profile.favorite_topic,
            motivation=profile.motivation,
        )

    def trimmed(self) -> dict[str, str]:
        return {k: v.strip() for k, v in self.model_dump().items()}


class FlowState(BaseModel):
    """Everything the current screen needs."""

    model_config = ConfigDict(frozen=True)

    stage: Stage
    step: OnboardingStep | ModuleStep | ProjectStep | None = None
    profile: UserProfile = Field(default_factory=UserProfile)
    inputs: OnboardingInputs = Field(default_factory=OnboardingInputs)
    chosen_activity: Activity | None = None
    custom_project_name: str = ""
    intro_page: int = 0
    quiz_reset_token: int = 0
    chat_tab: ChatTab = ChatTab.CHAT
    game: GameKind | None = None
    last_score: int | None = None


class LearningFlowController:
    """Owns the flow state and applies actions to it.

    Args:
        store: Profile persistence; a login is recorded on construction.
        score_provider: Grades a completed custom project.
        modules: Content per quiz-based stage (solar, wind).
    """

    def __init__(
        self,
        store: ProfileStore,
        score_provider: ScoreProvider = random_project_score,
        modules: dict[Stage, TopicModule] | None = None,
    ):
        self.store = store
        self.score_provider = score_provider
        self.modules = modules or DEFAULT_MODULES
        self.quiz: QuizEngine | None = None

        profile = store.record_login()
        inputs = OnboardingInputs.from_profile(profile)
        if profile.is_registered:
            self._state = FlowState(stage=Stage.HOME, profile=profile, inputs=inputs)
        else:
            self._state = FlowState(
                stage=Stage.ONBOARDING,
                step=OnboardingStep.LANGUAGE,
                profile=profile,
                inputs=inputs,
            )
        logger.info("flow_started", stage=self._state.stage.value)

        self._handlers: dict[type, Callable] = {
            a.ContinueLearning: self._continue_learning,
            a.ResetProfile: self._reset_profile,
            a.SetInput: self._set_input,
            a.Next: self._next,
            a.Back: self._back,
            a.Edit: self._edit,
            a.Confirm: self._confirm,
            a.StartLearning: self._start_learning,
            a.SelectActivity: self._select_activity,
            a.NextPage: self._next_page,
            a.PreviousPage: self._previous_page,
            a.StartQuiz: self._start_quiz,
            a.SelectOption: self._select_option,
            a.ConfirmAnswer: self._confirm_answer,
            a.TryAgain: self._try_again,
            a.GoHome: self._go_home,
            a.StartProject: self._start_project,
            a.CompleteProject: self._complete_project,
            a.SelectTab: self._select_tab,
            a.Dismiss: self._dismiss,
            a.LaunchGame: self._launch_game,
            a.LeaveGame: self._leave_game,
        }

    @property
    def state(self) -> FlowState:
        return self._state

    def dispatch(self, action: a.FlowAction) -> FlowState:
        """Apply ``action``; invalid actions are logged and ignored."""
        handler = self._handlers.get(type(action))
        new_state = handler(self._state, action) if handler else None
        if new_state is None:
            logger.warning(
                "flow_action_ignored",
                action=action.type,
                stage=self._state.stage.value,
                step=self._state.step.value if self._state.step else None,
            )
            return self._state
        if new_state.stage != self._state.stage or new_state.step != self._state.step:
            logger.info(
                "flow_transition",
                action=action.type,
                stage=new_state.stage.value,
                step=new_state.step.value if new_state.step else None,
            )
        self._state = new_state
        return new_state

    # Derived views

    @property
    def current_module(self) -> TopicModule | None:
        return self.modules.get(self._state.stage)

    @property
    def results_message(self) -> str | None:
        """Feedback line for the results screen currently shown."""
        state = self._state
        if state.step not in (ModuleStep.RESULTS, ProjectStep.RESULTS):
            return None
        if state.stage is Stage.CUSTOM_PROJECT:
            score = state.profile.custom_project_score
            return result_message(score, CUSTOM_PROJECT_RESULT_MESSAGES)
        module = self.current_module
        if module is None:
            return None
        score = getattr(state.profile, module.score_field)
        return result_message(score, module.result_messages)

    def activity_labels(self) -> list[tuple[Activity, str]]:
        """Activity menu entries in the learner's language."""
        language = self._state.profile.language
        return [(activity, translate(activity.label, language)) for activity in Activity]

    # Home

    def _continue_learning(self, s: FlowState, action) -> FlowState | None:
        if s.stage is not Stage.HOME or not s.profile.is_registered:
            return None
        return s.model_copy(update={"stage": Stage.ACTIVITY_SELECTION, "step": None})

    def _reset_profile(self, s: FlowState, action) -> FlowState | None:
        if s.stage is not Stage.HOME:
            return None
        self.store.clear()
        self.quiz = None
        return FlowState(stage=Stage.ONBOARDING, step=OnboardingStep.LANGUAGE)

    # Onboarding

    def _set_input(self, s: FlowState, action: a.SetInput) -> FlowState | None:
        if s.stage is Stage.ONBOARDING and s.step in ONBOARDING_FIELDS:
            field = ONBOARDING_FIELDS[s.step]
            inputs = s.inputs.model_copy(update={field: action.value})
            return s.model_copy(update={"inputs": inputs})
        if s.stage is Stage.CUSTOM_PROJECT and s.step is ProjectStep.PROJECT_NAME:
            return s.model_copy(update={"custom_project_name": action.value})
        return None

    def _next(self, s: FlowState, action) -> FlowState | None:
        if s.stage is not Stage.ONBOARDING or s.step not in ONBOARDING_FIELDS:
            return None
        value = getattr(s.inputs, ONBOARDING_FIELDS[s.step])
        if not value.strip():
            return None
        following = ONBOARDING_ORDER[ONBOARDING_ORDER.index(s.step) + 1]
        return s.model_copy(update={"step": following})

    def _back(self, s: FlowState, action) -> FlowState | None:
        if s.stage is not Stage.ONBOARDING or s.step is OnboardingStep.LANGUAGE:
            return None
        previous = ONBOARDING_ORDER[ONBOARDING_ORDER.index(s.step) - 1]
        return s.model_copy(update={"step": previous})

    def _edit(self, s: FlowState, action) -> FlowState | None:
        if s.step is not OnboardingStep.CONFIRMATION:
            return None
        return s.model_copy(update={"step": OnboardingStep.LANGUAGE})

    def _confirm(self, s: FlowState, action) -> FlowState | None:
        if s.step is not OnboardingStep.CONFIRMATION:
            return None
        answers = s.inputs.trimmed()
        if not all(answers.values()):
            return None
        profile = self.store.update(**answers)
        logger.info("onboarding_confirmed", name=profile.name, language=profile.language)
        return s.model_copy(update={
            "stage": Stage.READY_TO_LEARN,
            "step": None,
            "profile": profile,
            "inputs": OnboardingInputs(**answers),
        })

    def _start_learning(self, s: FlowState, action) -> FlowState | None:
        if s.stage is not Stage.READY_TO_LEARN:
            return None
        return s.model_copy(update={"stage": Stage.ACTIVITY_SELECTION})

    # Activity selection

    def _select_activity(self, s: FlowState, action: a.SelectActivity) -> FlowState | None:
        if s.stage is not Stage.ACTIVITY_SELECTION or not s.profile.is_registered:
            return None
        stage = ACTIVITY_STAGES[action.activity]
        step: ModuleStep | ProjectStep | None = None
        if stage in self.modules:
            step = ModuleStep.INTRO
        elif stage is Stage.CUSTOM_PROJECT:
            step = ProjectStep.PROJECT_NAME
        self.quiz = None
        return s.model_copy(update={
            "stage": stage,
            "step": step,
            "chosen_activity": action.activity,
            "intro_page": 0,
            "chat_tab": ChatTab.CHAT,
            "last_score": None,
        })

    def _launch_game(self, s: FlowState, action: a.LaunchGame) -> FlowState | None:
        if s.stage is not Stage.ACTIVITY_SELECTION or not s.profile.is_registered:
            return None
        return s.model_copy(update={"stage": Stage.GAME, "game": action.game})

    def _leave_game(self, s: FlowState, action) -> FlowState | None:
        if s.stage is not Stage.GAME:
            return None
        return s.model_copy(update={"stage": Stage.ACTIVITY_SELECTION, "game": None})

    # Topic modules

    def _next_page(self, s: FlowState, action) -> FlowState | None:
        module = self.current_module
        if module is None or s.step is not ModuleStep.INTRO:
            return None
        if s.intro_page >= len(module.intro) - 1:
            return None
        return s.model_copy(update={"intro_page": s.intro_page + 1})

    def _previous_page(self, s: FlowState, action) -> FlowState | None:
        if self.current_module is None or s.step is not ModuleStep.INTRO or s.intro_page == 0:
            return None
        return s.model_copy(update={"intro_page": s.intro_page - 1})

    def _start_quiz(self, s: FlowState, action) -> FlowState | None:
        module = self.current_module
        if module is None or s.step is not ModuleStep.INTRO:
            return None
        if s.intro_page < len(module.intro) - 1:
            return None
        return self._open_quiz(s, module, s.quiz_reset_token)

    def _select_option(self, s: FlowState, action: a.SelectOption) -> FlowState | None:
        if s.step is not ModuleStep.QUIZ or self.quiz is None:
            return None
        if not self.quiz.select_option(action.option):
            return None
        return s

    def _confirm_answer(self, s: FlowState, action) -> FlowState | None:
        if s.step is not ModuleStep.QUIZ or self.quiz is None:
            return None
        if not self.quiz.questions:
            return self._finish_quiz(s, 0)
        if not self.quiz.selected_option.strip():
            return None
        score = self.quiz.confirm_and_advance()
        if score is None:
            return s
        return self._finish_quiz(s, score)

    def _try_again(self, s: FlowState, action) -> FlowState | None:
        module = self.current_module
        if module is not None and s.step is ModuleStep.RESULTS:
            return self._open_quiz(s, module, s.quiz_reset_token + 1)
        if s.stage is Stage.CUSTOM_PROJECT and s.step is ProjectStep.RESULTS:
            return s.model_copy(update={"step": ProjectStep.PROJECT_NAME})
        return None

    def _go_home(self, s: FlowState, action) -> FlowState | None:
        if s.step not in (ModuleStep.RESULTS, ProjectStep.RESULTS):
            return None
        self.quiz = None
        return s.model_copy(update={
            "stage": Stage.HOME,
            "step": None,
            "chosen_activity": None,
            "intro_page": 0,
        })

    def _open_quiz(self, s: FlowState, module: TopicModule, token: int) -> FlowState:
        if self.quiz is None:
            self.quiz = QuizEngine(module.questions, reset_token=token)
        else:
            self.quiz.reset(token)
        state = s.model_copy(update={"step": ModuleStep.QUIZ, "quiz_reset_token": token})
        if not module.questions:
            # Nothing to answer: the quiz completes straight away with 0
            return self._finish_quiz(state, 0)
        return state

    def _finish_quiz(self, s: FlowState, score: int) -> FlowState:
        module = self.current_module
        profile = self.store.update(**{module.score_field: score})
        logger.info("module_score_saved", stage=s.stage.value, score=score)
        return s.model_copy(update={
            "step": ModuleStep.RESULTS,
            "profile": profile,
            "last_score": score,
        })

    # Custom project

    def _start_project(self, s: FlowState, action) -> FlowState | None:
        if s.stage is not Stage.CUSTOM_PROJECT or s.step is not ProjectStep.PROJECT_NAME:
            return None
        name = s.custom_project_name.strip()
        if not name:
            return None
        return s.model_copy(update={
            "step": ProjectStep.GUIDED_LEARNING,
            "custom_project_name": name,
        })

    def _complete_project(self, s: FlowState, action) -> FlowState | None:
        if s.stage is not Stage.CUSTOM_PROJECT or s.step is not ProjectStep.GUIDED_LEARNING:
            return None
        score = max(0, min(100, int(self.score_provider(s.custom_project_name))))
        profile = self.store.update(custom_project_score=score)
        logger.info("project_score_saved", project=s.custom_project_name, score=score)
        return s.model_copy(update={
            "step": ProjectStep.RESULTS,
            "profile": profile,
            "last_score": score,
        })

    # TalkToMe

    def _select_tab(self, s: FlowState, action: a.SelectTab) -> FlowState | None:
        if s.stage is not Stage.TALK_TO_ME:
            return None
        return s.model_copy(update={"chat_tab": action.tab})

    def _dismiss(self, s: FlowState, action) -> FlowState | None:
        if s.stage is not Stage.TALK_TO_ME:
            return None
        return s.model_copy(update={"stage": Stage.ACTIVITY_SELECTION, "chosen_activity": None})


def question_view(quiz: QuizEngine | None) -> dict | None:
    """Display data for the question on screen ("N of M", text, options)."""
    if quiz is None or quiz.current_question is None:
        return None
    question = quiz.current_question
    return {
        "position": quiz.position,
        "total": quiz.total,
        "text": question.text,
        "options": list(question.options),
        "selected": quiz.selected_option,
    }


def intro_view(module: TopicModule | None, page: int) -> dict | None:
    if module is None or not module.intro:
        return None
    page = max(0, min(page, len(module.intro) - 1))
    text, icon = module.intro[page]
    return {
        "page": page + 1,
        "pages": len(module.intro),
        "text": text,
        "icon": icon,
        "is_last": page == len(module.intro) - 1,
    }


def snapshot(controller: LearningFlowController) -> dict:
    """JSON-ready view of the controller for the host UI."""
    state = controller.state
    data = state.model_dump(mode="json")
    data["profile"] = state.profile.model_dump(mode="json", by_alias=True)
    data["results_message"] = controller.results_message
    if state.step is ModuleStep.INTRO:
        data["intro"] = intro_view(controller.current_module, state.intro_page)
    if state.step is ModuleStep.QUIZ:
        data["question"] = question_view(controller.quiz)
    if state.stage is Stage.ACTIVITY_SELECTION:
        data["activities"] = [
            {"activity": activity.value, "label": label}
            for activity, label in controller.activity_labels()
        ]
    return data
