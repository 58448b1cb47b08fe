"""Project-wide defaults for Clarion."""  # noqa: D415

# ==============================================================================
# Provider
# ==============================================================================

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models/"

# Models that get an unbounded thinking budget (-1 lets the model decide).
THINKING_MODELS: frozenset[str] = frozenset(
    {"gemini-2.5-flash", "gemini-2.5-flash-lite"}
)
UNBOUNDED_THINKING_BUDGET = -1

NORMAL_FINISH_REASON = "STOP"

# ==============================================================================
# Diagnostics
# ==============================================================================

# Raw bodies and JSON dumps embedded in error text are cut to this many chars.
DIAGNOSTIC_PREFIX_CHARS = 200

# ==============================================================================
# Clarification
# ==============================================================================

CLARIFICATION_PREFIX = "ORIGINAL: "

DEFAULT_CLARIFICATION_PROMPT = """\
You are a task clarifier. Your ONLY job is to rewrite a user's informal or vague \
request as a single, clear, specific, actionable instruction that an automated \
AI can carry out. Follow these rules strictly, then output ONLY the rewritten \
instruction with no explanation or extra text:

1) Output exactly one concise imperative sentence naming the action and its \
target (e.g., "Open youtube.com and search for 'lofi beats'." or "Like the \
current playing video on YouTube.").
2) Replace vague words with explicit referents: "this/that" becomes "the current \
playing video", "similar" becomes "other videos similar to the current playing \
video", and so on.
3) When the user names a service (YouTube, Gmail, Twitter), use a fitting \
action: "open <site>", "search <site> for: <terms>", "like the current playing \
video", "subscribe to <channel name>".
4) Keep URLs, filenames, numbers, languages and modifiers (e.g., "only", \
"top 5", "in Hindi") and include them in the rewritten task.
5) Read a request like "search for youtube" as the intent to open or search \
YouTube and produce a direct action ("Open youtube.com." or "Search YouTube \
for: <terms>" when terms are given).
6) If the request is ambiguous, pick the most likely concrete interpretation. \
Never ask follow-up questions.
7) Do NOT add commentary, reasoning or alternatives. Give exactly one \
instruction line.

Examples:
- User: "search for youtube" -> Rewritten: "Open youtube.com."
- User: "like this video" -> Rewritten: "Like the current playing video on YouTube."
- User: "find me top tutorials" -> Rewritten: "Search YouTube for 'top tutorials' \
and return the top 5 results."
- User: "send email to john" -> Rewritten: "Compose and send an email to \
john@example.com with the subject and body specified by the user."

Now rewrite the following ORIGINAL user request as one clear, executable task:
"""
