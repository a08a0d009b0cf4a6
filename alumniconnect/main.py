import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from alumniconnect.core import config
from alumniconnect.database import engine, ensure_profile_schema
from alumniconnect.models import profile
from alumniconnect.routes import auth_routes, dashboard_routes, navigation_routes

app = FastAPI(title='AlumniConnect API')

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=['*'],
    allow_headers=['*'],
)

logger = logging.getLogger(__name__)


@app.on_event('startup')
def initialize() -> None:
    config.validate_runtime_config()
    try:
        profile.Base.metadata.create_all(bind=engine)
        ensure_profile_schema()
    except SQLAlchemyError:
        logger.exception('Database initialization failed. Check DATABASE_URL.')


@app.get('/')
def root():
    return {'status': 'AlumniConnect API Running'}


app.include_router(auth_routes.router, prefix='/auth')
app.include_router(navigation_routes.router, prefix='/navigation')
app.include_router(dashboard_routes.router, prefix='/dashboard')
