"""
Description:
Fixed values shared by the interview and resume flows: the question budget and
the user-facing messages shown when a step fails.

Dependencies:
- None
"""

# Number of interviewer questions before the session moves to the summary phase.
TOTAL_QUESTIONS = 5

# Longest answer accepted for one question. Five answers at this length plus
# the questions stay within TRANSCRIPT_MAX_LENGTH.
MAX_ANSWER_LENGTH = 3000
TRANSCRIPT_MAX_LENGTH = 30000

# Local validation messages (no remote call is made when these are raised)
JOB_TITLE_REQUIRED_MESSAGE = "Please enter a job title to begin."
ANSWER_REQUIRED_MESSAGE = "Please type an answer before sending."
ANSWER_TOO_LONG_MESSAGE = f"Please keep your answer under {MAX_ANSWER_LENGTH} characters."
RESUME_FIELDS_REQUIRED_MESSAGE = "Please provide your resume text and a target job title."
UNSUPPORTED_RESUME_FILE_MESSAGE = "Unsupported file type. Please upload a .txt file."
UNREADABLE_RESUME_FILE_MESSAGE = "Failed to read file."

# Remote failure messages, all of them recoverable by retrying the same action
INTERVIEW_START_FAILED_MESSAGE = "Failed to start the interview. Please try again."
INTERVIEW_TURN_FAILED_MESSAGE = "Failed to get a response from the interviewer. Please try again."
INTERVIEW_SUMMARY_FAILED_MESSAGE = "Failed to get interview summary. Please try again."
RESUME_ANALYSIS_FAILED_MESSAGE = "Failed to get analysis from AI. Please try again."

SESSION_BUSY_MESSAGE = "The interviewer is still responding. Please wait."
VOICE_INPUT_UNAVAILABLE_MESSAGE = "Voice input is not available on this server."

ALLOWED_RESUME_FILE_EXTENSIONS = (".txt",)
