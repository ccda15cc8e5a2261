# supportdesk/main.py
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from supportdesk.admin.routes import router as admin_router
from supportdesk.agent.routes import router as agent_router
from supportdesk.agent.webhook import WebhookClient
from supportdesk.core.config import Settings, get_settings
from supportdesk.core.database import Database
from supportdesk.core.errors import register_exception_handlers
from supportdesk.core.logging_config import configure_logging
from supportdesk.ticket.routes import history_router
from supportdesk.ticket.routes import router as ticket_router


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.db.connect()
        app.state.webhook = WebhookClient(settings.WEBHOOK_TICKET_URL, settings.WEBHOOK_TIMEOUT)
        try:
            yield
        finally:
            app.state.webhook.close()
            app.state.db.disconnect()

    app = FastAPI(
        title=settings.APP_NAME,
        description=settings.APP_DESC,
        version=settings.APP_VERSION,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.db = Database(settings.DATABASE_URL)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    # Routers
    app.include_router(agent_router)
    app.include_router(ticket_router)
    app.include_router(history_router)
    app.include_router(admin_router)

    @app.get("/health", tags=["Health"])
    def health():
        return {"status": "ok"}

    return app


app = create_app()
