from datetime import date

from pydantic import BaseModel, field_validator


class JobPosting(BaseModel):
    id: int
    title: str
    company: str
    location: str
    type: str
    match: int
    posted: str


class AlumniContact(BaseModel):
    id: int
    name: str
    company: str
    position: str
    department: str
    availability: str
    referred_job_role: str


class DashboardStats(BaseModel):
    profile_score: int
    applications: int
    referrals: int


class StudentOverview(BaseModel):
    title: str
    welcome: str
    tabs: list[str]
    stats: DashboardStats
    recommended_jobs: list[JobPosting]
    active_alumni: list[AlumniContact]


class RoleOverview(BaseModel):
    title: str
    welcome: str
    tabs: list[str]


class MentorshipRequest(BaseModel):
    student_name: str
    alumni_name: str
    topic: str
    preferred_date: date

    @field_validator('student_name', 'alumni_name', 'topic')
    @classmethod
    def validate_required_text(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError('This field is required.')
        return normalized

    def to_ticket(self) -> dict[str, str]:
        requested = self.preferred_date.isoformat()
        return {
            'u_student': self.student_name,
            'u_alumni': self.alumni_name,
            'u_session_topic': self.topic,
            'u_requested_date': requested,
            'u_confirmed_date': requested,
        }


class MentorshipResponse(BaseModel):
    message: str
    ticket: dict | list | None = None
    next_tab: str = 'overview'


class ReferralForm(BaseModel):
    alumni_id: int
    resume_link: str
    profile_url: str

    @field_validator('resume_link', 'profile_url')
    @classmethod
    def validate_link(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError('This field is required.')
        return normalized


class ReferralRequest(BaseModel):
    studentName: str
    alumniAssigned: str
    jobRole: str
    resumeLink: str
    profileUrl: str
    status: str = 'Pending'


class ReferralResponse(BaseModel):
    message: str
    referral: dict | list | None = None
