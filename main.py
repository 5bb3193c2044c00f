from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded

from core.config import ALLOWED_ORIGINS
from core.logger import setup_logger
from services.interview_ai import get_evaluator
from services.rate_limiter import limiter, rate_limit_exceeded_handler
from routers import auth, interview, questions, dashboard, tips

logger = setup_logger("main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # a bad LEXICON_PATH raises LexiconError here, before any request is served
    get_evaluator()
    logger.info("Scoring lexicon loaded")
    yield


app = FastAPI(title="Interview Coach API", lifespan=lifespan)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

# Enable CORS for the frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router)
app.include_router(interview.router)
app.include_router(questions.router)
app.include_router(dashboard.router)
app.include_router(tips.router)


@app.get("/")
async def root():
    return {"message": "Interview Coach API is running"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
