from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from flightarchive.api.v1.routes.archive import router as archive_router
from flightarchive.api.v1.routes.health import router as health_router


app = FastAPI(title="Flight Archive API")

# Read-only archive; any origin may fetch it.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["GET"],
    allow_headers=["*"],
)

app.include_router(health_router, prefix="/v1")
app.include_router(archive_router)
