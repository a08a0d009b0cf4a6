"""Outbound calls made on behalf of dashboard actions.

Both helpers return ``(status_code, body)`` and let ``httpx.HTTPError`` and
``ValueError`` (non-JSON bodies) propagate to the route, which decides how to
report them.
"""
from typing import Any

import httpx

from alumniconnect.core import config
from alumniconnect.schemas.dashboard import MentorshipRequest, ReferralRequest


def upstream_error_message(body: Any, default: str = 'Something went wrong') -> str:
    error = body.get('error') if isinstance(body, dict) else None
    if isinstance(error, str) and error:
        return error
    if isinstance(error, dict) and error.get('message'):
        return str(error['message'])
    return default


async def submit_mentorship_request(client: httpx.AsyncClient, request: MentorshipRequest) -> tuple[int, Any]:
    response = await client.post(
        config.MENTORSHIP_PROXY_URL,
        json=request.to_ticket(),
        headers={'Content-Type': 'application/json'},
    )
    return response.status_code, response.json()


async def submit_referral_request(client: httpx.AsyncClient, referral: ReferralRequest) -> tuple[int, Any]:
    response = await client.post(
        f"{config.REFERRAL_API_URL.rstrip('/')}/api/referrals",
        json=referral.model_dump(),
        headers={
            'Content-Type': 'application/json',
            'Authorization': f'Bearer {config.REFERRAL_API_TOKEN}',
        },
    )
    return response.status_code, response.json()
