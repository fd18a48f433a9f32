from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from exam_portal.core.config import settings
from exam_portal.core.logging import configure_logging
from exam_portal.core.init_db import init_db
from exam_portal.core.scheduler import start_scheduler, stop_scheduler
from exam_portal.endpoints import auth, admin, subject, quiz, question, student, student_portal, exam
from exam_portal.middleware.exceptions import global_exception_handler, http_exception_handler, validation_exception_handler
from exam_portal.middleware.logging import RequestLoggingMiddleware

app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    openapi_url=f"{settings.API_V1_STR}/openapi.json"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

app.add_middleware(GZipMiddleware, minimum_size=1000)
app.add_middleware(RequestLoggingMiddleware)

app.add_exception_handler(Exception, global_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)

app.include_router(auth.router, prefix="/auth", tags=["Auth"])
app.include_router(admin.router, prefix="/admin", tags=["Admin"])
app.include_router(subject.router, prefix="/subjects", tags=["Subjects"])
app.include_router(quiz.router, prefix="/quizzes", tags=["Quizzes"])
app.include_router(question.router, prefix="/questions", tags=["Questions"])
app.include_router(student.router, prefix="/students", tags=["Students"])
app.include_router(student_portal.router, prefix="/student", tags=["Student"])
app.include_router(exam.router, prefix="/exam", tags=["Exam"])

@app.on_event("startup")
async def startup_event():
    configure_logging()
    init_db()
    start_scheduler()

@app.on_event("shutdown")
async def shutdown_event():
    stop_scheduler()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
