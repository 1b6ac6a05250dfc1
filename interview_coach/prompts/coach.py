"""
Interview Coach Prompt Templates

Contains the prompts and JSON response schemas for:
- Generating questions from a job description
- Coaching feedback on a single answer

Schemas use the OpenAPI subset accepted by Gemini's ``responseSchema``.
"""


def _scored(extra: dict | None = None) -> dict:
    properties = {
        "score": {"type": "NUMBER", "description": "Score from 1-5"},
        "feedback": {"type": "STRING"},
    }
    properties.update(extra or {})
    return {
        "type": "OBJECT",
        "properties": properties,
        "required": list(properties),
    }


class CoachPrompts:
    """
    Prompt templates for question generation and answer feedback.

    Key principles:
    - Encouraging, constructive tone
    - One actionable tip per answer
    - Strict JSON output
    """

    QUESTIONS_SCHEMA = {
        "type": "ARRAY",
        "items": {"type": "STRING"},
    }

    FEEDBACK_SCHEMA = {
        "type": "OBJECT",
        "properties": {
            "relevance": _scored(),
            "starMethod": _scored({
                "situation": {"type": "BOOLEAN"},
                "task": {"type": "BOOLEAN"},
                "action": {"type": "BOOLEAN"},
                "result": {"type": "BOOLEAN"},
            }),
            "clarityConfidence": _scored({
                "powerWords": {"type": "ARRAY", "items": {"type": "STRING"}},
                "passiveWords": {"type": "ARRAY", "items": {"type": "STRING"}},
            }),
            "pace": {
                "type": "OBJECT",
                "properties": {
                    "wpm": {"type": "NUMBER"},
                    "feedback": {"type": "STRING"},
                },
                "required": ["wpm", "feedback"],
            },
            "fillerWords": {
                "type": "OBJECT",
                "properties": {
                    "count": {"type": "NUMBER"},
                    "words": {"type": "ARRAY", "items": {"type": "STRING"}},
                    "feedback": {"type": "STRING"},
                },
                "required": ["count", "words", "feedback"],
            },
            "overallFeedback": {"type": "STRING"},
        },
        "required": [
            "relevance",
            "starMethod",
            "clarityConfidence",
            "pace",
            "fillerWords",
            "overallFeedback",
        ],
    }

    FILLER_WORDS = ["um", "uh", "ah", "like", "you know", "so", "right"]

    def generate_questions_prompt(self, job_description: str, count: int) -> str:
        """Build the prompt for generating questions from a job description."""
        return f"""You are an expert HR manager. Based on the following job description, generate a list of {count} relevant interview questions. The questions should cover a mix of behavioral, situational, and technical topics. Return the questions as a JSON array of strings.

Job Description:
---
{job_description}
---
"""

    def feedback_prompt(self, question_text: str, answer_text: str, words_per_minute: int) -> str:
        """Build the prompt for coaching feedback on one answer."""
        fillers = ", ".join(f'"{word}"' for word in self.FILLER_WORDS)
        return f"""You are a helpful, encouraging, and empathetic interview coach. Your audience may be facing barriers, so your tone must be unfailingly positive and constructive. Analyze the following interview question and the user's answer.

The user's answer was recorded at a pace of approximately {words_per_minute} words per minute.

Question: "{question_text}"
Answer: "{answer_text}"

Analyze the answer and provide feedback. A good speaking pace is between 140 and 160 WPM. Count occurrences of filler words like {fillers}. For behavioral questions, check for the STAR method. Identify power words vs. passive words. Finally, provide one single, actionable piece of constructive feedback, framed positively.
"""
