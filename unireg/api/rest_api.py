"""
REST API implementation for the UniReg registry using FastAPI.
"""

import logging
import threading
from datetime import datetime, timezone
from typing import Optional, Dict, Any, List

from pydantic import BaseModel, Field

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..core.entities import Student, Course, GradeRecord
from ..core.enums import Faculty, StudentStatus, CourseType, Semester, Grade
from ..core.exceptions import (
    UniRegException, ResourceNotFoundError, InvalidStateError,
    FacultyMismatchError, CapacityExceededError
)
from ..services import Registry

logger = logging.getLogger(__name__)

ERROR_STATUS_CODES = {
    ResourceNotFoundError: status.HTTP_404_NOT_FOUND,
    InvalidStateError: status.HTTP_409_CONFLICT,
    FacultyMismatchError: status.HTTP_409_CONFLICT,
    CapacityExceededError: status.HTTP_409_CONFLICT,
}


# Pydantic models for API
class StudentCreate(BaseModel):
    full_name: str = Field(..., min_length=1, max_length=200)
    faculty: Faculty
    year: int
    status: StudentStatus = StudentStatus.ACTIVE
    enrollment_date: Optional[datetime] = None
    group_number: str = Field("", max_length=20)


class StudentResponse(BaseModel):
    id: int
    full_name: str
    faculty: str
    year: int
    status: str
    enrollment_date: datetime
    group_number: str


class StatusUpdate(BaseModel):
    status: StudentStatus


class CourseCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    course_type: CourseType
    credits: int = Field(..., ge=0, le=60)
    semester: Semester
    faculty: Faculty
    max_students: int = Field(..., ge=0)


class CourseResponse(BaseModel):
    id: int
    name: str
    course_type: str
    credits: int
    semester: str
    faculty: str
    max_students: int


class RegistrationRequest(BaseModel):
    student_id: int = Field(..., ge=0)
    course_id: int = Field(..., ge=0)


class RegistrationResponse(BaseModel):
    student_id: int
    course_id: int
    registered_students: List[int]


class GradeCreate(BaseModel):
    student_id: int = Field(..., ge=0)
    course_id: int = Field(..., ge=0)
    grade: Grade


class GradeResponse(BaseModel):
    student_id: int
    course_id: int
    grade: int
    date: datetime
    semester: str


class AverageResponse(BaseModel):
    student_id: int
    average_grade: float


class RegistryRestAPI:
    """REST API implementation for the registry."""

    def __init__(self, registry: Registry):
        self._registry = registry
        self._lock = threading.RLock()

        # Create FastAPI app
        self.app = FastAPI(
            title="UniReg University Registry API",
            description="Students, courses, registrations and grades",
            version=__version__,
            docs_url="/docs",
            redoc_url="/redoc"
        )

        # Add CORS middleware
        self.app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

        self._setup_error_handlers()
        self._setup_routes()

    @property
    def registry(self) -> Registry:
        return self._registry

    def _setup_error_handlers(self):
        """Map registry errors to HTTP responses."""

        @self.app.exception_handler(UniRegException)
        async def registry_error_handler(request: Request, exc: UniRegException):
            status_code = ERROR_STATUS_CODES.get(type(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)
            logger.warning(
                "%s %s failed: %s", request.method, request.url.path, exc.message,
                extra={'error_code': exc.error_code},
            )
            return JSONResponse(
                status_code=status_code,
                content={"detail": exc.message, "error_code": exc.error_code},
            )

    def _setup_routes(self):
        """Setup API routes."""

        @self.app.get("/", response_model=Dict[str, str])
        async def root():
            """Root endpoint."""
            return {
                "message": "UniReg University Registry API",
                "version": __version__,
                "docs": "/docs"
            }

        @self.app.get("/health", response_model=Dict[str, str])
        async def health_check():
            """Health check endpoint."""
            return {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}

        # Student endpoints
        @self.app.post("/students", response_model=StudentResponse, status_code=status.HTTP_201_CREATED)
        async def create_student(student_data: StudentCreate):
            """Enroll a new student."""
            with self._lock:
                student = self._registry.enroll_student(
                    full_name=student_data.full_name,
                    faculty=student_data.faculty,
                    year=student_data.year,
                    status=student_data.status,
                    enrollment_date=student_data.enrollment_date,
                    group_number=student_data.group_number,
                )
                return self._student_to_response(student)

        @self.app.get("/students", response_model=List[StudentResponse])
        async def list_students(faculty: Optional[Faculty] = None):
            """List students, optionally only those of one faculty."""
            with self._lock:
                if faculty is None:
                    students = self._registry.list_students()
                else:
                    students = self._registry.get_students_by_faculty(faculty)
                return [self._student_to_response(s) for s in students]

        @self.app.get("/students/excellent", response_model=List[StudentResponse])
        async def list_excellent_students(faculty: Faculty):
            """List students of a faculty with only excellent grades."""
            with self._lock:
                students = self._registry.get_excellent_students_by_faculty(faculty)
                return [self._student_to_response(s) for s in students]

        @self.app.get("/students/{student_id}", response_model=StudentResponse)
        async def get_student(student_id: int):
            """Get a student by ID."""
            with self._lock:
                return self._student_to_response(self._registry.get_student(student_id))

        @self.app.put("/students/{student_id}/status", response_model=StudentResponse)
        async def update_student_status(student_id: int, update: StatusUpdate):
            """Change a student's status."""
            with self._lock:
                student = self._registry.update_student_status(student_id, update.status)
                return self._student_to_response(student)

        @self.app.get("/students/{student_id}/grades", response_model=List[GradeResponse])
        async def get_student_grades(student_id: int):
            """Get all grade records of a student."""
            with self._lock:
                return [self._grade_to_response(g) for g in self._registry.get_student_grades(student_id)]

        @self.app.get("/students/{student_id}/average", response_model=AverageResponse)
        async def get_average_grade(student_id: int):
            """Get a student's average grade."""
            with self._lock:
                return AverageResponse(
                    student_id=student_id,
                    average_grade=self._registry.calculate_average_grade(student_id),
                )

        @self.app.get("/students/{student_id}/courses", response_model=List[int])
        async def get_student_courses(student_id: int):
            """Get IDs of the courses a student is registered for."""
            with self._lock:
                return self._registry.get_registered_courses(student_id)

        # Course endpoints
        @self.app.post("/courses", response_model=CourseResponse, status_code=status.HTTP_201_CREATED)
        async def create_course(course_data: CourseCreate):
            """Add a course to the catalog."""
            with self._lock:
                course = self._registry.add_course(
                    name=course_data.name,
                    course_type=course_data.course_type,
                    credits=course_data.credits,
                    semester=course_data.semester,
                    faculty=course_data.faculty,
                    max_students=course_data.max_students,
                )
                return self._course_to_response(course)

        @self.app.get("/courses", response_model=List[CourseResponse])
        async def list_courses(faculty: Optional[Faculty] = None, semester: Optional[Semester] = None):
            """List courses; with both faculty and semester, only the available ones."""
            with self._lock:
                if faculty is not None and semester is not None:
                    courses = self._registry.get_available_courses(faculty, semester)
                else:
                    courses = [
                        c for c in self._registry.list_courses()
                        if (faculty is None or c.faculty is faculty)
                        and (semester is None or c.semester is semester)
                    ]
                return [self._course_to_response(c) for c in courses]

        @self.app.get("/courses/{course_id}", response_model=CourseResponse)
        async def get_course(course_id: int):
            """Get a course by ID."""
            with self._lock:
                return self._course_to_response(self._registry.get_course(course_id))

        @self.app.get("/courses/{course_id}/students", response_model=List[int])
        async def get_course_students(course_id: int):
            """Get IDs of the students registered for a course."""
            with self._lock:
                return self._registry.get_registered_students(course_id)

        # Registration endpoints
        @self.app.post("/registrations", response_model=RegistrationResponse,
                       status_code=status.HTTP_201_CREATED)
        async def register_for_course(registration: RegistrationRequest):
            """Register a student for a course."""
            with self._lock:
                self._registry.register_for_course(registration.student_id, registration.course_id)
                return RegistrationResponse(
                    student_id=registration.student_id,
                    course_id=registration.course_id,
                    registered_students=self._registry.get_registered_students(registration.course_id),
                )

        # Grade endpoints
        @self.app.post("/grades", response_model=GradeResponse, status_code=status.HTTP_201_CREATED)
        async def set_grade(grade_data: GradeCreate):
            """Record a grade."""
            with self._lock:
                record = self._registry.set_grade(grade_data.student_id, grade_data.course_id, grade_data.grade)
                return self._grade_to_response(record)

        # Statistics endpoints
        @self.app.get("/statistics", response_model=Dict[str, Any])
        async def get_statistics():
            """Get registry statistics."""
            with self._lock:
                return self._registry.get_statistics()

    def _student_to_response(self, student: Student) -> StudentResponse:
        """Convert Student entity to response model."""
        return StudentResponse(
            id=student.id,
            full_name=student.full_name,
            faculty=student.faculty.value,
            year=student.year,
            status=student.status.value,
            enrollment_date=student.enrollment_date,
            group_number=student.group_number,
        )

    def _course_to_response(self, course: Course) -> CourseResponse:
        """Convert Course entity to response model."""
        return CourseResponse(
            id=course.id,
            name=course.name,
            course_type=course.course_type.value,
            credits=course.credits,
            semester=course.semester.value,
            faculty=course.faculty.value,
            max_students=course.max_students,
        )

    def _grade_to_response(self, record: GradeRecord) -> GradeResponse:
        """Convert GradeRecord to response model."""
        return GradeResponse(
            student_id=record.student_id,
            course_id=record.course_id,
            grade=record.grade.value,
            date=record.date,
            semester=record.semester.value,
        )
