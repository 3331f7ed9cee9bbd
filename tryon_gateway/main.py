from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tryon_gateway.config import logger

from .routers import router

# Initialize FastAPI application
app = FastAPI(
    title="Try-On Gateway",
    description="Dispatches virtual try-on requests to remote inference backends",
    version="1.0.0",
)

app.include_router(router)


# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


logger.info("Try-On Gateway initialized successfully")
