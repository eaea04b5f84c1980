"""Static metadata describing ExamDesk."""

APP_NAME = "ExamDesk"
APP_VERSION = "0.1"
APP_LICENSE = "MIT License"
APP_ABOUT_TEXT = (
    "ExamDesk lets professors author timed multiple-choice exams and lets students "
    "take them from the browser. Submissions are graded automatically."
)

HELP_TEXT = (
    "Create exams in the editor, or import a .txt file using the exam format:\n\n"
    "TITLE: Trigonometry quiz\n"
    "DURATION: 20\n\n"
    "Q: What is $30^o$ in radians?\n"
    "A: \\frac{\\pi}{2}\nB: \\frac{\\pi}{6}\nC: \\frac{\\pi}{3}\n"
    "CORRECT: B\n\n"
    "Q: What is $45^o$ in radians?\n"
    "A: \\frac{\\pi}{3}\nB: \\frac{\\pi}{4}\n"
    "CORRECT: B"
)
