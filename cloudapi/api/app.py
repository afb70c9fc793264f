"""
FastAPI app
"""

from importlib.metadata import version

from fastapi import FastAPI

from cloudapi.config.settings import Settings
from cloudapi.core.errors import DirectoryError, add_exception_handlers
from cloudapi.service.local import LocalDirectory

from .dependencies import SETTINGS, logger
from .groups import group_app


def create_app(settings: Settings) -> FastAPI:
    """
    Build the API application, serving groups from the local directory
    described by `settings`.
    """

    async def lifespan(app: FastAPI):
        log = logger().bind(database_type=settings.database_type)

        manager = settings.async_manager()

        if settings.create_tables:
            await manager.create_all()
            await log.ainfo("api.startup.tables_created")

        app.settings = settings
        app.directory = LocalDirectory(manager=manager)

        # Ensure that the configured accounts exist
        for login in settings.create_accounts:
            try:
                await app.directory.add_account(login=login)
                await log.ainfo("api.startup.account_created", login=login)
            except DirectoryError:
                await log.adebug("api.startup.account_exists", login=login)

        yield

        await manager.dispose()

    app = FastAPI(
        lifespan=lifespan,
        title="CloudAPI Groups",
        summary="Account-scoped group management backed by the directory service.",
        version=version("cloudapi"),
    )

    app = add_exception_handlers(app)

    app.include_router(group_app)

    return app


app = create_app(SETTINGS())
