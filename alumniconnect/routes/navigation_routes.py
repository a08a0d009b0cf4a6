from fastapi import APIRouter, Depends

from alumniconnect.auth.dependencies import get_session_context
from alumniconnect.navigation import Menu, build_menu, dashboard_route, profile_route
from alumniconnect.schemas.auth import SessionContext

router = APIRouter(tags=['navigation'])


@router.get('/menu', response_model=Menu)
def navigation_menu(context: SessionContext = Depends(get_session_context)):
    return build_menu(context.user)


@router.get('/dashboard')
def navigation_dashboard(context: SessionContext = Depends(get_session_context)):
    return {'target': dashboard_route(context.user)}


@router.get('/profile')
def navigation_profile(context: SessionContext = Depends(get_session_context)):
    return {'target': profile_route(context.user)}
