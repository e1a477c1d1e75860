import logging
import os
from typing import Optional

import uvicorn
from fastapi import Depends, FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from config import Settings
from cookies import create_visitor_cookie, get_visitor_cookie
from database import create_tables_with_retry, make_engine, make_session_factory
from visits import VisitService

logger = logging.getLogger(__name__)


def get_db(request: Request):
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    if settings is None:
        settings = Settings.from_env()

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    engine = make_engine(settings.database_url)
    try:
        create_tables_with_retry(engine)
    except Exception as e:
        logger.error("Failed to create tables: %s", e)

    app = FastAPI(title="Visitor Counter")
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = make_session_factory(engine)

    if not settings.cors_allowed_origins:
        logger.warning("CORS_ALLOWED_ORIGINS is empty, cross-origin requests will be refused")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allowed_origins,
        allow_methods=["GET"],
        allow_headers=["*"],
        allow_credentials=True,
    )

    @app.get("/visit")
    def track_visitor(
        request: Request,
        response: Response,
        db: Session = Depends(get_db),
    ):
        try:
            service = VisitService(db)
            if get_visitor_cookie(request) is None:
                count = service.increment_and_get_count()
                create_visitor_cookie(settings).apply(response)
            else:
                count = service.get_current_count()
            return {"count": count}
        except Exception:
            logger.exception("Failed to track visitor")
            return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})

    @app.get("/health")
    def health_check(db: Session = Depends(get_db)):
        try:
            db.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            logger.warning("Database health check failed: %s", e)
            return JSONResponse(status_code=503, content={"status": "unavailable"})
        return {"status": "ok"}

    return app


if __name__ == "__main__":
    uvicorn.run(
        "main:create_app",
        factory=True,
        host="0.0.0.0",
        port=int(os.getenv("PORT", "8000")),
    )
