import logging

import httpx
from fastapi import APIRouter, Depends, HTTPException, status

from alumniconnect.auth.dependencies import require_admin, require_alumni, require_student
from alumniconnect.core.http_client import get_http_client
from alumniconnect.integrations import (
    submit_mentorship_request,
    submit_referral_request,
    upstream_error_message,
)
from alumniconnect.schemas.auth import User
from alumniconnect.schemas.dashboard import (
    AlumniContact,
    DashboardStats,
    JobPosting,
    MentorshipRequest,
    MentorshipResponse,
    ReferralForm,
    ReferralRequest,
    ReferralResponse,
    RoleOverview,
    StudentOverview,
)

router = APIRouter(tags=['dashboard'])

logger = logging.getLogger(__name__)

STUDENT_TABS = ['overview', 'jobs', 'mentorship']
ALUMNI_TABS = ['overview', 'referrals', 'mentorship']
ADMIN_TABS = ['overview', 'users']

STUDENT_STATS = DashboardStats(profile_score=85, applications=12, referrals=5)

RECOMMENDED_JOBS = [
    JobPosting(
        id=1,
        title='Frontend Developer',
        company='TechCorp Inc.',
        location='San Francisco, CA',
        type='Full-time',
        match=95,
        posted='2 days ago',
    ),
    JobPosting(
        id=2,
        title='UI/UX Designer',
        company='Design Studio',
        location='New York, NY',
        type='Remote',
        match=88,
        posted='1 week ago',
    ),
    JobPosting(
        id=3,
        title='Software Engineer',
        company='StartupXYZ',
        location='Austin, TX',
        type='Hybrid',
        match=82,
        posted='3 days ago',
    ),
]

ACTIVE_ALUMNI = [
    AlumniContact(
        id=1,
        name='Shaik Muzna Jawhar',
        company='Servicenow',
        position='Associate Technical Engineer',
        department='Computer Science',
        availability='Available',
        referred_job_role='ServiceNow Developer Intern',
    ),
    AlumniContact(
        id=2,
        name='Venkat Polisetti',
        company='Servicenow',
        position='Associate Technical Support Engineer',
        department='Computer Science',
        availability='Busy',
        referred_job_role='ServiceNow Technical Support Engineer Intern',
    ),
]

MENTORSHIP_SENT = 'Mentorship request submitted.'
MENTORSHIP_FAILED = 'Failed to submit mentorship request.'
REFERRAL_FAILED = 'Failed to send referral request.'


def find_alumni(alumni_id: int) -> AlumniContact | None:
    return next((alumni for alumni in ACTIVE_ALUMNI if alumni.id == alumni_id), None)


def upstream_status(status_code: int) -> int:
    if 400 <= status_code < 600:
        return status_code
    return status.HTTP_502_BAD_GATEWAY


@router.get('/student', response_model=StudentOverview)
def student_overview(current_user: User = Depends(require_student)):
    return StudentOverview(
        title='Student Dashboard',
        welcome="Welcome back! Here's your personalized career hub.",
        tabs=STUDENT_TABS,
        stats=STUDENT_STATS,
        recommended_jobs=RECOMMENDED_JOBS,
        active_alumni=ACTIVE_ALUMNI,
    )


@router.get('/student/jobs', response_model=list[JobPosting])
def student_job_board(current_user: User = Depends(require_student)):
    return RECOMMENDED_JOBS


@router.post('/student/mentorship', response_model=MentorshipResponse)
async def request_mentorship(
    data: MentorshipRequest,
    current_user: User = Depends(require_student),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    try:
        status_code, body = await submit_mentorship_request(client, data)
    except (httpx.HTTPError, ValueError) as exc:
        logger.exception('Mentorship request failed for user %s', current_user.id)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=MENTORSHIP_FAILED) from exc

    if status_code >= 300:
        raise HTTPException(
            status_code=upstream_status(status_code),
            detail=upstream_error_message(body, MENTORSHIP_FAILED),
        )
    return MentorshipResponse(message=MENTORSHIP_SENT, ticket=body)


@router.post('/student/referrals', response_model=ReferralResponse, status_code=status.HTTP_201_CREATED)
async def request_referral(
    data: ReferralForm,
    current_user: User = Depends(require_student),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    alumni = find_alumni(data.alumni_id)
    if alumni is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='Alumni not found.')

    referral = ReferralRequest(
        studentName=current_user.full_name or current_user.email,
        alumniAssigned=alumni.name,
        jobRole=alumni.referred_job_role,
        resumeLink=data.resume_link,
        profileUrl=data.profile_url,
    )

    try:
        status_code, body = await submit_referral_request(client, referral)
    except (httpx.HTTPError, ValueError) as exc:
        logger.exception('Referral request to %s failed', alumni.name)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=REFERRAL_FAILED) from exc

    if status_code >= 300:
        raise HTTPException(status_code=upstream_status(status_code), detail=upstream_error_message(body))
    return ReferralResponse(message=f'Referral request sent to {alumni.name} successfully!', referral=body)


@router.get('/alumni', response_model=RoleOverview)
def alumni_overview(current_user: User = Depends(require_alumni)):
    return RoleOverview(
        title='Alumni Dashboard',
        welcome=f'Welcome back, {current_user.full_name or current_user.email}!',
        tabs=ALUMNI_TABS,
    )


@router.get('/admin', response_model=RoleOverview)
def admin_overview(current_user: User = Depends(require_admin)):
    return RoleOverview(
        title='Admin Dashboard',
        welcome=f'Welcome back, {current_user.full_name or current_user.email}!',
        tabs=ADMIN_TABS,
    )
