import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from backend.core import config
from backend.core.errors import BerichtsheftError
from backend.database import create_db_engine, create_session_factory, init_db
from backend.routes import auth_routes, calendar_routes, report_routes

logger = logging.getLogger(__name__)


def _validation_message(exc: RequestValidationError) -> str:
    messages = []
    for error in exc.errors():
        location = '.'.join(str(part) for part in error.get('loc', ()) if part != 'body')
        message = error.get('msg', 'Invalid value')
        messages.append(f'{location}: {message}' if location else message)
    return '; '.join(messages) or 'Invalid input.'


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(BerichtsheftError)
    async def handle_app_error(request: Request, exc: BerichtsheftError):
        return JSONResponse(status_code=exc.status_code, content={'error': exc.detail})

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={'error': _validation_message(exc)})

    @app.exception_handler(SQLAlchemyError)
    async def handle_database_error(request: Request, exc: SQLAlchemyError):
        logger.error('Database error on %s %s', request.method, request.url.path, exc_info=exc)
        return JSONResponse(status_code=500, content={'error': 'Internal server error.'})


def create_app(engine: Engine | None = None) -> FastAPI:
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )
    config.validate_runtime_config()

    engine = engine or create_db_engine(config.DATABASE_URL, echo=config.DATABASE_ECHO)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        try:
            init_db(engine)
        except SQLAlchemyError:
            logger.exception('Database initialization failed. Check DATABASE_URL.')
        try:
            yield
        finally:
            engine.dispose()

    app = FastAPI(title='Berichtsheft API', lifespan=lifespan)
    app.state.session_factory = create_session_factory(engine)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=['*'],
        allow_headers=['*'],
    )

    register_error_handlers(app)

    @app.get('/')
    def root():
        return {'status': 'Berichtsheft API Running'}

    app.include_router(auth_routes.router, prefix='/auth')
    app.include_router(calendar_routes.router, prefix='/calendar')
    app.include_router(report_routes.router, prefix='/reports')
    return app
