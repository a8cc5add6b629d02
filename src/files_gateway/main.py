from textwrap import dedent
import logging
from typing import TYPE_CHECKING, Optional

from fastapi import FastAPI
from fastapi.routing import APIRoute
from fastapi.middleware.cors import CORSMiddleware

from files_gateway.errors import (
    GatewayError,
    handle_broad_exceptions,
    handle_gateway_error,
)
from files_gateway.routers.files import router as files_router
from files_gateway.s3.client import create_s3_client
from files_gateway.settings import Settings

if TYPE_CHECKING:
    from mypy_boto3_s3 import S3Client

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, s3_client: Optional["S3Client"] = None) -> FastAPI:
    """
    Create the Files Gateway application.

    Settings and the S3 client are built once here and shared by every request
    through ``app.state``. Both can be supplied by the caller, e.g. in tests.
    """
    settings = settings or Settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Files Gateway",
        summary="Upload, list, delete and download files kept in S3",
        version="v1",
        description=dedent(
            """\
        | Method | Path | Purpose |
        | --- | --- | --- |
        | `POST` | `/upload` | store up to 10 files sent in the `files` form field |
        | `GET` | `/files` | list stored files |
        | `DELETE` | `/delete/{file_name}` | remove `uploads/{file_name}` |
        | `GET` | `/download/{file_name}` | stream `uploads/{file_name}` as an attachment |
        """
        ),
        docs_url="/docs",
        generate_unique_id_function=custom_generate_unique_id,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "DELETE"],
        allow_headers=["Content-Type"],
    )
    app.state.settings = settings
    app.state.s3_client = s3_client or create_s3_client(settings)

    app.include_router(files_router, tags=["files"])

    app.add_exception_handler(
        exc_class_or_status_code=GatewayError,
        handler=handle_gateway_error,
    )
    app.middleware("http")(handle_broad_exceptions)

    logger.info(f"Files Gateway ready, bucket: {settings.s3_bucket_name}")
    return app


def configure_logging(log_level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def custom_generate_unique_id(route: APIRoute):
    """
    Generate prettier `operationId`s in the OpenAPI schema.

    These become the function names in generated client SDKs.
    """
    return f"{route.tags[0]}-{route.name}"


if __name__ == "__main__":
    import uvicorn

    settings = Settings()
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)
