"""Qt UI constants used across widgets."""

WINDOW_TITLE: str = "QuizGen"
PLACEHOLDER_TOPIC: str = (
    "Write detailed topic here... Example: JavaScript basics - variables, loops, functions, etc."
)

MODE_BUTTON_GENERATE: str = "New Quiz"
MODE_BUTTON_IMPORT: str = "Import Quiz"
MODE_BUTTON_SAVE_FILE: str = "Save Quiz to File"

GENERATE_BUTTON: str = "Generate Quiz"
GENERATING_BUTTON: str = "Generating..."
PREV_BUTTON: str = "Previous"
NEXT_BUTTON: str = "Next"
SUBMIT_BUTTON: str = "Submit Quiz"
MARK_BUTTON: str = "Mark"
MARKED_BUTTON: str = "Marked"
RETAKE_BUTTON: str = "Retake Quiz"
NEW_QUIZ_BUTTON: str = "New Quiz"

IMPORT_DIALOG_TITLE: str = "Select quiz file"
IMPORT_FILE_FILTER: str = "Quiz files (*.txt);;All files (*.*)"
EXPORT_DIALOG_TITLE: str = "Save quiz to file"
EXPORT_FILE_FILTER: str = "Quiz files (*.txt);;All files (*.*)"

TOPIC_REQUIRED_MESSAGE: str = "Please enter a topic for your quiz."
NO_QUIZ_LOADED_MESSAGE: str = "Generate or import a quiz first."
TIME_UP_MESSAGE: str = "Time is up. Your answers were submitted automatically."

SESSION_REFRESH_INTERVAL_MS: int = 250
NAVIGATOR_COLUMNS: int = 10
