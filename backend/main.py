import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from backend.core import config
from backend.core.errors import AppError, InternalError, ValidationError
from backend.database import init_db
from backend.routes import admin_routes, auth_routes, issue_routes

logging.basicConfig(
    level=config.LOG_LEVEL.upper(),
    format='%(asctime)s %(levelname)s %(name)s: %(message)s',
)
logger = logging.getLogger(__name__)

app = FastAPI(title='Campus FixIt API', version='1.0.0')

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=['*'],
    allow_headers=['*'],
)


@app.on_event('startup')
def initialize_database() -> None:
    config.validate_runtime_config()
    try:
        init_db()
    except SQLAlchemyError:
        logger.exception('Database initialization failed. Check DATABASE_URL and database credentials.')


@app.exception_handler(AppError)
async def handle_app_error(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error('%s %s failed: %s', request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


@app.exception_handler(RequestValidationError)
async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = []
    for error in exc.errors():
        location = [str(part) for part in error.get('loc', ()) if part not in ('body', 'query', 'path', 'form')]
        message = str(error.get('msg', 'Invalid value')).removeprefix('Value error, ')
        errors.append({'field': '.'.join(location) or None, 'message': message})
    return JSONResponse(status_code=400, content=ValidationError(errors=errors).to_body())


@app.exception_handler(SQLAlchemyError)
async def handle_database_error(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception('Database error during %s %s', request.method, request.url.path, exc_info=exc)
    error = InternalError()
    return JSONResponse(status_code=error.status_code, content=error.to_body())


@app.get('/')
def root():
    return {
        'message': 'Campus FixIt API',
        'version': '1.0.0',
        'endpoints': {
            'auth': {
                'register': 'POST /api/auth/register',
                'login': 'POST /api/auth/login',
                'me': 'GET /api/auth/me',
            },
            'student': {
                'createIssue': 'POST /api/issues',
                'myIssues': 'GET /api/issues/my-issues',
                'getIssue': 'GET /api/issues/:id',
                'filterIssues': 'GET /api/issues?category=&status=',
            },
            'admin': {
                'allIssues': 'GET /api/admin/issues?category=&status=',
                'updateIssue': 'PUT /api/admin/issues/:id',
                'resolveIssue': 'PUT /api/admin/issues/:id/resolve',
            },
        },
    }


app.include_router(auth_routes.router, prefix='/api/auth')
app.include_router(issue_routes.router, prefix='/api/issues')
app.include_router(admin_routes.router, prefix='/api/admin')
