import logging

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from finance_backend.core import config
from finance_backend.core.errors import register_exception_handlers
from finance_backend.database import Base, engine, ensure_user_schema
from finance_backend.models import user  # noqa: F401
from finance_backend.routes import auth_routes

logging.basicConfig(
    level=config.LOG_LEVEL,
    format='%(asctime)s  %(levelname)-8s  %(name)s - %(message)s',
)

logger = logging.getLogger(__name__)

app = FastAPI(title='Personal Finance API')

app.add_middleware(
    CORSMiddleware,
    allow_origins=[config.CLIENT_URL],
    allow_credentials=True,
    allow_methods=['*'],
    allow_headers=['*'],
)

register_exception_handlers(app)


@app.on_event('startup')
def initialize_database() -> None:
    config.validate_runtime_config()
    try:
        Base.metadata.create_all(bind=engine)
        ensure_user_schema()
    except SQLAlchemyError:
        logger.exception('Database initialization failed. Check DATABASE_URL.')


@app.get('/api/health')
def health():
    return {'status': 'OK', 'message': 'Server is running'}


app.include_router(auth_routes.router, prefix='/api/auth')


if __name__ == '__main__':
    uvicorn.run(app, host=config.HOST, port=config.PORT, log_level=config.LOG_LEVEL.lower())
