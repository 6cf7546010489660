"""
AI Gateway Client

The gateway speaks the OpenAI chat-completions protocol, so we use the
openai library pointed at AI_BASE_URL.

AI is used ONLY for:
- Mock test question generation (structured JSON)
- Mock interview conversation (streamed text)
- Mock interview feedback (structured JSON)
- Resume analysis (structured JSON)

Gateway failures are surfaced as AIServiceError, which the app maps to
an HTTP response: 429 rate limited, 402 credits exhausted, 502 anything
else. There are no retries.
"""
from typing import Iterator, List, Optional

import openai
from loguru import logger
from openai import OpenAI

from app.core.config import get_settings

settings = get_settings()


class AIServiceError(Exception):
    """Gateway failure carrying the HTTP status to report to the caller."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


RATE_LIMIT_MESSAGE = "Rate limit exceeded. Please try again later."
CREDITS_MESSAGE = "AI credits exhausted. Please add more credits."


def _wrap_gateway_error(exc: Exception) -> AIServiceError:
    if isinstance(exc, openai.RateLimitError):
        return AIServiceError(429, RATE_LIMIT_MESSAGE)
    if isinstance(exc, openai.APIStatusError) and exc.status_code == 402:
        return AIServiceError(402, CREDITS_MESSAGE)
    if isinstance(exc, openai.APIStatusError):
        return AIServiceError(502, f"AI gateway error: {exc.status_code}")
    return AIServiceError(502, "AI gateway error")


# ============================================================
# PROMPTS
# ============================================================

QUESTIONS_PROMPT = """You are an expert placement preparation instructor. Generate exactly {num_questions} multiple choice questions for a {difficulty} level {category} test{focus}.

Each question must have:
- A clear question text
- 4 options labeled A, B, C, D
- The correct answer (A, B, C, or D)
- A brief explanation

Return ONLY valid JSON in this exact format:
{{
  "questions": [
    {{
      "id": 1,
      "question": "Question text here?",
      "options": {{"A": "Option A text", "B": "Option B text", "C": "Option C text", "D": "Option D text"}},
      "correctAnswer": "A",
      "explanation": "Brief explanation why A is correct"
    }}
  ]
}}

For aptitude: Include quantitative, logical reasoning, and data interpretation questions.
For technical: Include coding concepts, data structures, algorithms, and problem-solving.
For verbal: Include reading comprehension, grammar, vocabulary, and verbal reasoning."""

INTERVIEW_START_PROMPT = """You are an experienced {interview_type} interviewer at a top tech company, conducting an interview for a {target_role} position. This is a {difficulty} level interview.

Your role:
- Start with a brief, friendly introduction
- Ask one question at a time
- Wait for the candidate's response before asking the next question
- Be encouraging but also challenging
- For technical interviews: Ask about data structures, algorithms, system design, and coding concepts
- For HR interviews: Ask about experiences, strengths, weaknesses, career goals
- For behavioral interviews: Use STAR method questions about past experiences

Start the interview now with a greeting and your first question."""

INTERVIEW_CONTINUE_PROMPT = """You are an experienced {interview_type} interviewer at a top tech company, conducting an interview for a {target_role} position. This is a {difficulty} level interview.

Guidelines for your response:
- Acknowledge the candidate's answer briefly (good points or areas to improve)
- Ask a follow-up question OR move to a new topic
- Keep the conversation natural and professional
- After 5-7 questions, you can wrap up the interview

If the candidate says they want to end the interview, provide a summary of their performance."""

INTERVIEW_FEEDBACK_PROMPT = """You are an experienced {interview_type} interviewer. Based on the interview conversation, provide detailed feedback.

Return ONLY valid JSON in this exact format:
{{
  "overallRating": 7.5,
  "strengths": ["Strength 1", "Strength 2", "Strength 3"],
  "improvements": ["Area to improve 1", "Area to improve 2"],
  "questionFeedback": [
    {{"question": "Question asked", "rating": 8, "feedback": "Brief feedback on answer"}}
  ],
  "tips": ["Tip 1 for future interviews", "Tip 2"],
  "summary": "Overall summary of the interview performance in 2-3 sentences"
}}

Rate on a scale of 1-10. Be constructive and helpful."""

RESUME_PROMPT = """You are an expert resume reviewer and career coach. Analyze the provided resume and give comprehensive, actionable feedback.

Your analysis should include:
1. Overall Score (0-100): A numerical rating of the resume quality
2. Summary: A brief 2-3 sentence overall assessment
3. Strengths: List 3-5 things the resume does well
4. Areas for Improvement: List 3-5 specific things to improve
5. ATS Compatibility: How well the resume will perform with Applicant Tracking Systems
6. Content Analysis: quantified achievements, action-oriented language, highlighted skills
7. Format & Structure: Comments on layout, readability, and organization
8. Recommendations: 3-5 specific, actionable recommendations
{target}
Format your response as a JSON object with the following structure:
{{
  "score": number,
  "summary": string,
  "strengths": string[],
  "improvements": string[],
  "atsScore": number,
  "atsNotes": string,
  "contentAnalysis": {{
    "quantifiedAchievements": boolean,
    "actionOriented": boolean,
    "skillsHighlighted": boolean,
    "notes": string
  }},
  "formatNotes": string,
  "recommendations": string[]
}}"""


class AIGatewayClient:
    """
    Wrapper around the OpenAI-compatible gateway.
    """

    def __init__(self):
        self.client = OpenAI(
            api_key=settings.ai_api_key or "missing-key",
            base_url=settings.ai_base_url
        )
        self.model = settings.ai_model

    def _call_api(self, messages: List[dict], max_tokens: int = 2000, temperature: float = 0.7) -> str:
        """
        Internal method for one non-streaming completion.
        Returns raw text response.
        """
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                max_tokens=max_tokens,
                temperature=temperature
            )
        except openai.OpenAIError as e:
            logger.error("AI gateway call failed: {}", e)
            raise _wrap_gateway_error(e) from e

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise AIServiceError(502, "No response from AI")
        return content

    def generate_questions(
        self,
        category: str,
        subcategory: Optional[str],
        difficulty: str,
        num_questions: int
    ) -> str:
        """Generate a multiple choice question set. Returns raw text."""
        focus = f" focusing on {subcategory}" if subcategory else ""
        system_prompt = QUESTIONS_PROMPT.format(
            num_questions=num_questions,
            difficulty=difficulty,
            category=category,
            focus=focus
        )
        label = f"{category} ({subcategory})" if subcategory else category
        user_content = f"Generate {num_questions} {difficulty} {label} questions for placement preparation."

        return self._call_api(
            [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_content}
            ],
            max_tokens=4000,
            temperature=0.7
        )

    def stream_interview(
        self,
        messages: List[dict],
        interview_type: str,
        target_role: Optional[str],
        difficulty: str,
        action: str = "continue"
    ) -> Iterator[str]:
        """
        Stream the interviewer's next turn as text deltas.
        action is "start" for the greeting, "continue" afterwards.
        """
        template = INTERVIEW_START_PROMPT if action == "start" else INTERVIEW_CONTINUE_PROMPT
        system_prompt = template.format(
            interview_type=interview_type,
            target_role=target_role or "software engineer",
            difficulty=difficulty
        )

        try:
            stream = self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "system", "content": system_prompt}, *messages],
                temperature=0.7,
                stream=True
            )
            for chunk in stream:
                if not chunk.choices:
                    continue
                delta = chunk.choices[0].delta.content
                if delta:
                    yield delta
        except openai.OpenAIError as e:
            logger.error("AI interview stream failed: {}", e)
            raise _wrap_gateway_error(e) from e

    def interview_feedback(self, messages: List[dict], interview_type: str) -> str:
        """Ask for structured feedback on a transcript. Returns raw text."""
        system_prompt = INTERVIEW_FEEDBACK_PROMPT.format(interview_type=interview_type)
        return self._call_api(
            [{"role": "system", "content": system_prompt}, *messages],
            max_tokens=2000,
            temperature=0.3
        )

    def analyze_resume(self, resume_text: str, target_role: Optional[str] = None) -> str:
        """Ask for a resume review. Returns raw text."""
        target = (
            f"\nThe candidate is targeting: {target_role}. Tailor your feedback accordingly.\n"
            if target_role else ""
        )
        return self._call_api(
            [
                {"role": "system", "content": RESUME_PROMPT.format(target=target)},
                {"role": "user", "content": f"Please analyze this resume:\n\n{resume_text}"}
            ],
            max_tokens=2000,
            temperature=0.3
        )

    def test_connection(self) -> bool:
        """Test if the AI gateway is reachable"""
        try:
            response = self._call_api(
                [
                    {"role": "system", "content": "You are a test assistant."},
                    {"role": "user", "content": "Reply with exactly: OK"}
                ],
                max_tokens=10,
                temperature=0
            )
            return "OK" in response.upper()
        except AIServiceError as e:
            logger.warning("AI gateway connection failed: {}", e.message)
            return False


# Singleton instance
_ai_client: AIGatewayClient = None


def get_ai_client() -> AIGatewayClient:
    """Get or create AI client (singleton pattern)"""
    global _ai_client
    if _ai_client is None:
        _ai_client = AIGatewayClient()
    return _ai_client
