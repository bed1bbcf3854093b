import logging
import time

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from backend.core.config import Settings, load_settings, validate_runtime_config
from backend.core.errors import ServiceError
from backend.database import check_connection, create_db_engine, create_session_factory, init_db
from backend.routes import auth_routes, result_routes

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )


async def handle_service_error(_request: Request, exc: ServiceError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={'error': exc.message},
        headers=exc.headers,
    )


async def handle_request_validation_error(_request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [
        {'loc': [str(part) for part in error.get('loc', ())], 'msg': error.get('msg', '')}
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={'error': 'Invalid request body', 'details': details},
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or load_settings()
    validate_runtime_config(settings)

    engine = create_db_engine(settings)

    app = FastAPI(title='Eye Test API')
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials='*' not in settings.cors_origins,
        allow_methods=['*'],
        allow_headers=['*'],
    )

    @app.middleware('http')
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - start
        logger.info('%s %s -> %s (%.3fs)', request.method, request.url.path, response.status_code, elapsed)
        return response

    app.add_exception_handler(ServiceError, handle_service_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)

    @app.on_event('startup')
    def initialize_database() -> None:
        if not check_connection(engine):
            return
        try:
            init_db(engine)
        except SQLAlchemyError:
            logger.exception('Database initialization failed. Check DATABASE_URL and credentials.')

    @app.on_event('shutdown')
    def dispose_engine() -> None:
        engine.dispose()

    @app.get('/')
    def root():
        return {'status': 'Eye Test API Running'}

    app.include_router(auth_routes.router, prefix='/api/auth')
    app.include_router(result_routes.router, prefix='/api/results')

    return app
