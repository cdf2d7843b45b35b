"""Static metadata describing QuizGen."""

APP_NAME = "QuizGen"
APP_VERSION = "0.1"
APP_LICENSE = "MIT License"
APP_ABOUT_TEXT = (
    "QuizGen turns a topic description into a timed multiple-choice quiz. "
    "Answer under the countdown, optionally with negative marking, then review "
    "every question with its explanation. Saved quizzes can be shared with guests by link."
)

HELP_TEXT = (
    "Describe the topic in as much detail as you like, pick the number of questions, "
    "the difficulty and the timer (one minute per question by default), then generate.\n\n"
    "Quizzes can also be imported from a .txt file using the format:\n\n"
    "Q: Which keyword declares a function in Python?\n"
    "A: func\nB: def\nC: lambda\nD: fn\n"
    "CORRECT: B\n"
    "EXPLANATION: `def` starts a function definition; `lambda` creates an anonymous expression."
)
