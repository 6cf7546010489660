"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.
Required text fields are stripped and rejected when blank, so an empty
name/topic/company never reaches the database.
"""

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator
from typing import ClassVar, Optional, List, Literal
from datetime import date, datetime
from enum import Enum


def _not_blank(value: Optional[str], field: str) -> str:
    if value is None or not value.strip():
        raise ValueError(f"{field} is required")
    return value.strip()


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class PartialUpdate(BaseModel):
    """Update body: omitted fields are left alone, explicit nulls are
    refused for columns that cannot be empty."""

    non_nullable: ClassVar[tuple] = ()

    @model_validator(mode="after")
    def reject_nulls(self):
        for field in self.non_nullable:
            if field in self.model_fields_set and getattr(self, field) is None:
                raise ValueError(f"{field} cannot be empty")
        return self


# ============================================================
# ENUMS
# ============================================================

class GoalStatus(str, Enum):
    not_started = "not_started"
    in_progress = "in_progress"
    completed = "completed"


class Difficulty(str, Enum):
    easy = "easy"
    medium = "medium"
    hard = "hard"


class ProblemStatus(str, Enum):
    solved = "solved"
    revision_needed = "revision_needed"
    not_solved = "not_solved"


class JobType(str, Enum):
    internship = "internship"
    full_time = "full_time"


class ApplicationStatus(str, Enum):
    applied = "applied"
    oa = "oa"
    interview = "interview"
    rejected = "rejected"
    selected = "selected"


class CompanyType(str, Enum):
    product = "product"
    service = "service"
    startup = "startup"


class Priority(str, Enum):
    high = "high"
    medium = "medium"
    low = "low"


class ReminderType(str, Enum):
    daily_learning = "daily_learning"
    daily_practice = "daily_practice"
    weekly_reflection = "weekly_reflection"


class TestCategory(str, Enum):
    aptitude = "aptitude"
    technical = "technical"
    verbal = "verbal"


class TechnicalSubcategory(str, Enum):
    dsa = "dsa"
    oop = "oop"
    dbms = "dbms"
    os = "os"
    cn = "cn"


class InterviewType(str, Enum):
    technical = "technical"
    hr = "hr"
    behavioral = "behavioral"


class SessionStatus(str, Enum):
    in_progress = "in_progress"
    completed = "completed"


AnswerChoice = Literal["A", "B", "C", "D"]


# ============================================================
# AUTH SCHEMAS
# ============================================================

class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6)
    full_name: Optional[str] = Field(None, max_length=100)

class LoginRequest(BaseModel):
    email: EmailStr
    password: str

class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user_id: str

class UserResponse(BaseModel):
    user_id: str
    email: str
    is_active: bool
    created_at: datetime


# ============================================================
# PROFILE SCHEMAS
# ============================================================

class ProfileUpdate(BaseModel):
    full_name: Optional[str] = Field(None, max_length=100)
    avatar_url: Optional[str] = None

class ProfileResponse(BaseModel):
    user_id: str
    email: str
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
    updated_at: datetime


# ============================================================
# LEARNING GOAL SCHEMAS
# ============================================================

class LearningGoalCreate(BaseModel):
    skill_name: str
    topic_name: str
    status: GoalStatus = GoalStatus.not_started
    start_date: Optional[date] = None
    target_date: Optional[date] = None
    resource_links: List[str] = []
    notes: Optional[str] = None

    @field_validator("skill_name", "topic_name")
    @classmethod
    def required_text(cls, v, info):
        return _not_blank(v, info.field_name)

    @field_validator("resource_links")
    @classmethod
    def drop_blank_links(cls, v: List[str]) -> List[str]:
        return [link.strip() for link in v if link and link.strip()]

class LearningGoalUpdate(PartialUpdate):
    non_nullable: ClassVar[tuple] = ("status",)

    skill_name: Optional[str] = None
    topic_name: Optional[str] = None
    status: Optional[GoalStatus] = None
    start_date: Optional[date] = None
    target_date: Optional[date] = None
    resource_links: Optional[List[str]] = None
    notes: Optional[str] = None

    @field_validator("skill_name", "topic_name")
    @classmethod
    def required_text(cls, v, info):
        return _not_blank(v, info.field_name)

    @field_validator("resource_links")
    @classmethod
    def drop_blank_links(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        if v is None:
            return None
        return [link.strip() for link in v if link and link.strip()]

class LearningGoalResponse(BaseModel):
    id: str
    skill_name: str
    topic_name: str
    status: GoalStatus
    start_date: Optional[date] = None
    target_date: Optional[date] = None
    resource_links: List[str] = []
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

class SkillProgress(BaseModel):
    skill: str
    total: int
    completed: int
    percentage: int

class LearningGoalListResponse(BaseModel):
    goals: List[LearningGoalResponse]
    total: int
    skill_progress: List[SkillProgress] = []


# ============================================================
# CODING PRACTICE SCHEMAS
# ============================================================

class CodingProblemCreate(BaseModel):
    platform: str
    problem_name: str
    difficulty: Difficulty
    status: ProblemStatus = ProblemStatus.not_solved
    date_practiced: date = Field(default_factory=date.today)
    notes: Optional[str] = None

    @field_validator("platform", "problem_name")
    @classmethod
    def required_text(cls, v, info):
        return _not_blank(v, info.field_name)

class CodingProblemUpdate(PartialUpdate):
    non_nullable: ClassVar[tuple] = ("difficulty", "status", "date_practiced")

    platform: Optional[str] = None
    problem_name: Optional[str] = None
    difficulty: Optional[Difficulty] = None
    status: Optional[ProblemStatus] = None
    date_practiced: Optional[date] = None
    notes: Optional[str] = None

    @field_validator("platform", "problem_name")
    @classmethod
    def required_text(cls, v, info):
        return _not_blank(v, info.field_name)

class CodingProblemResponse(BaseModel):
    id: str
    platform: str
    problem_name: str
    difficulty: Difficulty
    status: ProblemStatus
    date_practiced: date
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

class CodingStats(BaseModel):
    total: int
    solved: int
    revision: int
    easy: int
    medium: int
    hard: int
    current_streak: int

class CodingProblemListResponse(BaseModel):
    problems: List[CodingProblemResponse]
    total: int
    stats: CodingStats


# ============================================================
# RESUME SCHEMAS
# ============================================================

class ResumeChecklist(BaseModel):
    one_page: bool = False
    ats_friendly: bool = False
    updated_projects: bool = False
    updated_skills: bool = False

class ResumeCreate(BaseModel):
    resume_name: str
    version_number: int = Field(1, ge=1)
    target_role: Optional[str] = None
    file_url: Optional[str] = None
    notes: Optional[str] = None
    checklist: ResumeChecklist = ResumeChecklist()

    @field_validator("resume_name")
    @classmethod
    def required_text(cls, v, info):
        return _not_blank(v, info.field_name)

    @field_validator("target_role", "file_url", "notes")
    @classmethod
    def optional_text(cls, v):
        return _blank_to_none(v)

class ResumeUpdate(PartialUpdate):
    non_nullable: ClassVar[tuple] = ("version_number", "checklist")

    resume_name: Optional[str] = None
    version_number: Optional[int] = Field(None, ge=1)
    target_role: Optional[str] = None
    file_url: Optional[str] = None
    notes: Optional[str] = None
    checklist: Optional[ResumeChecklist] = None

    @field_validator("resume_name")
    @classmethod
    def required_text(cls, v, info):
        return _not_blank(v, info.field_name)

class ResumeResponse(BaseModel):
    id: str
    resume_name: str
    version_number: int
    target_role: Optional[str] = None
    file_url: Optional[str] = None
    notes: Optional[str] = None
    checklist: ResumeChecklist
    created_at: datetime
    updated_at: datetime

class ResumeFileResponse(BaseModel):
    file_url: str
    filename: str
    size: int

class ContentAnalysis(BaseModel):
    quantifiedAchievements: bool = False
    actionOriented: bool = False
    skillsHighlighted: bool = False
    notes: str = ""

class ResumeAnalysis(BaseModel):
    score: int = 0
    summary: str = ""
    strengths: List[str] = []
    improvements: List[str] = []
    atsScore: int = 0
    atsNotes: str = ""
    contentAnalysis: ContentAnalysis = ContentAnalysis()
    formatNotes: str = ""
    recommendations: List[str] = []
    rawResponse: Optional[str] = None

class ResumeAnalysisResponse(BaseModel):
    id: str
    target_role: Optional[str] = None
    source: str
    analysis: ResumeAnalysis
    created_at: datetime


# ============================================================
# APPLICATION SCHEMAS
# ============================================================

class ApplicationCreate(BaseModel):
    company_name: str
    role: str
    job_type: JobType
    status: ApplicationStatus = ApplicationStatus.applied
    application_link: Optional[str] = None
    apply_date: date = Field(default_factory=date.today)
    interview_date: Optional[date] = None
    notes: Optional[str] = None

    @field_validator("company_name", "role")
    @classmethod
    def required_text(cls, v, info):
        return _not_blank(v, info.field_name)

    @field_validator("application_link", "notes")
    @classmethod
    def optional_text(cls, v):
        return _blank_to_none(v)

class ApplicationUpdate(PartialUpdate):
    non_nullable: ClassVar[tuple] = ("job_type", "status", "apply_date")

    company_name: Optional[str] = None
    role: Optional[str] = None
    job_type: Optional[JobType] = None
    status: Optional[ApplicationStatus] = None
    application_link: Optional[str] = None
    apply_date: Optional[date] = None
    interview_date: Optional[date] = None
    notes: Optional[str] = None

    @field_validator("company_name", "role")
    @classmethod
    def required_text(cls, v, info):
        return _not_blank(v, info.field_name)

class ApplicationResponse(BaseModel):
    id: str
    company_name: str
    role: str
    job_type: JobType
    status: ApplicationStatus
    application_link: Optional[str] = None
    apply_date: date
    interview_date: Optional[date] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

class ApplicationListResponse(BaseModel):
    applications: List[ApplicationResponse]
    total: int
    upcoming_interviews: List[ApplicationResponse] = []


# ============================================================
# ROADMAP SCHEMAS
# ============================================================

class MonthlyGoal(BaseModel):
    month: str
    goals: List[str] = []

    @field_validator("month")
    @classmethod
    def required_text(cls, v, info):
        return _not_blank(v, info.field_name)

class SkillPriority(BaseModel):
    skill: str
    priority: Priority = Priority.medium

    @field_validator("skill")
    @classmethod
    def required_text(cls, v, info):
        return _not_blank(v, info.field_name)

class RoadmapUpdate(BaseModel):
    target_role: Optional[str] = None
    company_type: Optional[CompanyType] = None
    monthly_goals: List[MonthlyGoal] = []
    skill_priorities: List[SkillPriority] = []
    weaknesses: Optional[str] = None

    @field_validator("target_role", "weaknesses")
    @classmethod
    def optional_text(cls, v):
        return _blank_to_none(v)

    @field_validator("monthly_goals")
    @classmethod
    def drop_empty_goals(cls, v: List[MonthlyGoal]) -> List[MonthlyGoal]:
        cleaned = []
        for month in v:
            goals = [g.strip() for g in month.goals if g and g.strip()]
            if goals:
                cleaned.append(MonthlyGoal(month=month.month, goals=goals))
        return cleaned

class RoadmapResponse(BaseModel):
    id: str
    target_role: Optional[str] = None
    company_type: Optional[CompanyType] = None
    monthly_goals: List[MonthlyGoal] = []
    skill_priorities: List[SkillPriority] = []
    weaknesses: Optional[str] = None
    created_at: datetime
    updated_at: datetime


# ============================================================
# REMINDER SCHEMAS
# ============================================================

class ReminderCreate(BaseModel):
    reminder_type: ReminderType
    message: str
    is_active: bool = True

    @field_validator("message")
    @classmethod
    def required_text(cls, v, info):
        return _not_blank(v, info.field_name)

class ReminderUpdate(PartialUpdate):
    non_nullable: ClassVar[tuple] = ("is_active",)

    message: Optional[str] = None
    is_active: Optional[bool] = None

    @field_validator("message")
    @classmethod
    def required_text(cls, v, info):
        return _not_blank(v, info.field_name)

class ReminderResponse(BaseModel):
    id: str
    reminder_type: ReminderType
    message: str
    is_active: bool
    created_at: datetime

class MotivationResponse(BaseModel):
    quote: str
    author: str
    reflection_prompt: str


# ============================================================
# DASHBOARD SCHEMAS
# ============================================================

class DashboardStats(BaseModel):
    total_learning_goals: int
    completed_skills: int
    problems_solved: int
    current_streak: int
    applications_sent: int
    interviews_attended: int

class DailyActivity(BaseModel):
    name: str
    date: date
    problems: int

class StatusCount(BaseModel):
    status: ApplicationStatus
    label: str
    value: int

class DashboardResponse(BaseModel):
    stats: DashboardStats
    weekly_activity: List[DailyActivity]
    application_status: List[StatusCount]
    quote: str
    quote_author: str


# ============================================================
# MOCK TEST SCHEMAS
# ============================================================

class MockTestCreate(BaseModel):
    category: TestCategory
    subcategory: Optional[TechnicalSubcategory] = None
    difficulty: Difficulty = Difficulty.medium
    num_questions: int = Field(10, ge=1, le=30)

    @model_validator(mode="after")
    def subcategory_only_for_technical(self):
        if self.category != TestCategory.technical:
            self.subcategory = None
        return self

class QuestionOptions(BaseModel):
    A: str
    B: str
    C: str
    D: str

class Question(BaseModel):
    id: int
    question: str
    options: QuestionOptions
    correctAnswer: Optional[AnswerChoice] = None
    explanation: Optional[str] = None

class AnswerUpdate(BaseModel):
    answer: AnswerChoice

class MockTestSubmit(BaseModel):
    answers: Optional[List[Literal["", "A", "B", "C", "D"]]] = None

class MockTestResponse(BaseModel):
    id: str
    category: TestCategory
    subcategory: Optional[str] = None
    difficulty: Difficulty
    total_questions: int
    correct_answers: int
    time_taken: Optional[int] = None
    max_time: int
    time_remaining: int
    questions: List[Question]
    answers: List[str]
    status: SessionStatus
    score: float
    created_at: datetime
    completed_at: Optional[datetime] = None

class MockTestStats(BaseModel):
    tests_taken: int
    average_score: int
    correct_answers: int
    time_spent_minutes: int


# ============================================================
# MOCK INTERVIEW SCHEMAS
# ============================================================

class ChatMessage(BaseModel):
    role: Literal["user", "assistant"]
    content: str

class MockInterviewCreate(BaseModel):
    interview_type: InterviewType
    target_role: str = "Software Engineer"
    difficulty: Difficulty = Difficulty.medium

    @field_validator("target_role")
    @classmethod
    def default_role(cls, v: str) -> str:
        return v.strip() or "Software Engineer"

class InterviewReply(BaseModel):
    content: str = Field(..., max_length=8000)

    @field_validator("content")
    @classmethod
    def required_text(cls, v, info):
        return _not_blank(v, info.field_name)

class QuestionFeedback(BaseModel):
    question: str = ""
    rating: float = 0
    feedback: str = ""

class InterviewFeedback(BaseModel):
    overallRating: float = 0
    strengths: List[str] = []
    improvements: List[str] = []
    questionFeedback: List[QuestionFeedback] = []
    tips: List[str] = []
    summary: str = ""
    rawResponse: Optional[str] = None

class MockInterviewResponse(BaseModel):
    id: str
    interview_type: InterviewType
    target_role: Optional[str] = None
    difficulty: Difficulty
    messages: List[ChatMessage]
    questions_asked: int
    feedback: Optional[InterviewFeedback] = None
    overall_rating: Optional[float] = None
    status: SessionStatus
    created_at: datetime
    completed_at: Optional[datetime] = None

class MockInterviewStats(BaseModel):
    interviews: int
    average_rating: Optional[float] = None
    technical: int
    non_technical: int


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class MessageResponse(BaseModel):
    message: str
    success: bool = True
