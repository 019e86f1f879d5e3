"""Topic module content: intro walkthroughs, quiz questions and result messages."""

from enum import StrEnum

from interactive_learning.models.quiz import QuizQuestion


class Activity(StrEnum):
    """Entries of the activity menu."""

    SOLAR = "solar"
    WIND = "wind"
    CUSTOM_PROJECT = "custom_project"
    TALK_TO_ME = "talk_to_me"

    @property
    def label(self) -> str:
        return ACTIVITY_LABELS[self]


ACTIVITY_LABELS: dict[Activity, str] = {
    Activity.SOLAR: "Harvest Solar Energy",
    Activity.WIND: "Harvest Wind Energy",
    Activity.CUSTOM_PROJECT: "Custom Project",
    Activity.TALK_TO_ME: "TalkToMe",
}

LEARNING_LEVEL = "Hands-On"

SOLAR_INTRO: list[tuple[str, str]] = [
    ("Find a pizza box, black paper, clear plastic wrap, and aluminum foil.", "🏠"),
    ("Cut a flap into the box's lid and cover the inside of the flap with foil.", "✂️"),
    ("Line the box bottom with the black paper to absorb heat.", "📄"),
    ("Seal the opening with clear plastic wrap to trap the sun's heat.", "🌡️"),
    ("Place a marshmallow inside and point the foil flap toward the sun.", "🍡"),
    ("Watch your simple oven use solar energy to cook your treat!", "🔥"),
]

WIND_INTRO: list[tuple[str, str]] = [
    ("Build a small pinwheel from paper and a pin.", "📌"),
    ("Attach the pinwheel to a small DC motor (from a toy car).", "🔧"),
    ("Connect the motor's wires to a small LED light.", "💡"),
    ("Take it outside on a windy day or use a fan.", "🌪️"),
    (
        "Watch the wind spin the pinwheel, turning the motor, "
        "which acts as a generator to light up the LED!",
        "⚡",
    ),
]

SOLAR_QUESTIONS: list[QuizQuestion] = [
    QuizQuestion(
        text="What does a DIY solar oven use to trap heat?",
        correct_answer="Plastic wrap",
        options=("Plastic wrap", "A fan", "Ice", "A dark cloth"),
    ),
    QuizQuestion(
        text="Which color best absorbs sunlight inside the oven?",
        correct_answer="Black",
        options=("Black", "White", "Yellow", "Green"),
    ),
    QuizQuestion(
        text="What part of the solar oven reflects sunlight into the box?",
        correct_answer="Aluminum foil flap",
        options=("Aluminum foil flap", "The black paper", "The plastic", "The pizza"),
    ),
    QuizQuestion(
        text="Is solar energy a renewable resource?",
        correct_answer="Yes",
        options=("Yes", "No"),
    ),
    QuizQuestion(
        text="When do solar panels work best?",
        correct_answer="A sunny afternoon",
        options=("A sunny afternoon", "Night time", "A rainy morning", "Inside a box"),
    ),
]

WIND_QUESTIONS: list[QuizQuestion] = [
    QuizQuestion(
        text="What device converts wind energy into electricity in our DIY project?",
        correct_answer="A motor",
        options=("A motor", "A battery", "An LED", "Paper"),
    ),
    QuizQuestion(
        text="What part of the pinwheel catches the wind?",
        correct_answer="The blades",
        options=("The blades", "The pin", "The stick", "The motor"),
    ),
    QuizQuestion(
        text="Is wind energy a renewable resource?",
        correct_answer="Yes",
        options=("Yes", "No"),
    ),
    QuizQuestion(
        text="Does wind power create pollution?",
        correct_answer="No",
        options=("Yes", "No"),
    ),
    QuizQuestion(
        text="Where should you place a wind turbine for the best effect?",
        correct_answer="In a windy place",
        options=("In a windy place", "In the shade", "Inside a building", "Underwater"),
    ),
]

SOLAR_RESULT_MESSAGES: dict[int, str] = {
    100: "🌟 Perfect! You're a Solar Genius!",
    80: "🎉 Excellent! You're brilliant with solar power!",
    70: "👍 Great job! Keep learning about solar energy!",
    0: "💪 Keep trying! Review and try again!",
}

WIND_RESULT_MESSAGES: dict[int, str] = {
    100: "🌟 Amazing! You're a Wind Expert!",
    80: "🎉 Fantastic! You understand wind power!",
    70: "👍 Good work! Keep mastering wind energy!",
    0: "💪 Don't give up! Every expert was a beginner.",
}

CUSTOM_PROJECT_RESULT_MESSAGES: dict[int, str] = {
    90: "🏆 Outstanding! You're a natural creator!",
    70: "🎉 Great work! Impressive project skills!",
    50: "👍 Good effort! Keep practicing!",
    0: "💪 Keep learning! Every project is a step forward.",
}
