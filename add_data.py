"""
Script to add sample data to a running UniReg server via the REST API.
Make sure the server is running before executing this script.

Usage:
    python add_data.py [--base-url http://127.0.0.1:8000]
"""

import argparse
import json
import os
import sys
from typing import Any, Dict, List, Optional

import requests


def _console_supports_utf8() -> bool:
    enc = getattr(sys.stdout, "encoding", None)
    return enc is not None and "utf" in enc.lower()


_OK_CHAR = "✓" if _console_supports_utf8() else "[OK]"
_FAIL_CHAR = "✗" if _console_supports_utf8() else "[FAIL]"
_WARN_CHAR = "⚠" if _console_supports_utf8() else "[WARN]"

DEFAULT_BASE_URL = "http://127.0.0.1:8000"

SAMPLE_STUDENTS = [
    ("Alice Johnson", "computer_science", 1, "CS-11"),
    ("Bob Smith", "computer_science", 2, "CS-21"),
    ("Carol Davis", "economics", 1, "EC-11"),
    ("David Wilson", "law", 3, "LW-31"),
    ("Emma Brown", "engineering", 2, "EN-21"),
    ("Frank Miller", "computer_science", 1, "CS-11"),
]

SAMPLE_COURSES = [
    ("Introduction to Programming", "mandatory", 5, "first", "computer_science", 30),
    ("Operating Systems", "optional", 4, "second", "computer_science", 2),
    ("Macroeconomics", "mandatory", 4, "first", "economics", 40),
    ("Constitutional Law", "mandatory", 6, "first", "law", 25),
    ("Thermodynamics", "special", 3, "second", "engineering", 15),
]


def detect_base_url(session=requests) -> str:
    """Determine a reachable base URL.

    Priority: environment variable `UNIREG_BASE_URL`, then common local ports.
    If nothing responds, fall back to the default.
    """
    env = os.environ.get("UNIREG_BASE_URL")
    if env:
        return env

    candidates = [
        "http://127.0.0.1:8000",
        "http://127.0.0.1:8888",
        "http://localhost:8000",
        "http://localhost:8888",
    ]

    for c in candidates:
        try:
            resp = session.get(f"{c}/health", timeout=0.5)
        except requests.exceptions.RequestException:
            continue
        if resp.status_code == 200:
            return c

    return DEFAULT_BASE_URL


class SeedClient:
    """Thin REST client that reports every call on the console."""

    def __init__(self, base_url: str = DEFAULT_BASE_URL, session=None):
        self.base_url = base_url.rstrip("/")
        self.session = session if session is not None else requests.Session()
        self.failures: List[str] = []

    def _post(self, path: str, data: Dict[str, Any], what: str) -> Optional[Dict[str, Any]]:
        try:
            response = self.session.post(f"{self.base_url}{path}", json=data)
        except requests.exceptions.RequestException as e:
            print(f"{_FAIL_CHAR} Error creating {what}: {e}")
            self.failures.append(what)
            return None
        if response.status_code == 201:
            return response.json()
        print(f"{_FAIL_CHAR} Failed to create {what}: {response.text}")
        self.failures.append(what)
        return None

    def _get(self, path: str, what: str) -> Any:
        try:
            response = self.session.get(f"{self.base_url}{path}")
        except requests.exceptions.RequestException as e:
            print(f"{_FAIL_CHAR} Error getting {what}: {e}")
            return None
        if response.status_code == 200:
            return response.json()
        print(f"{_FAIL_CHAR} Failed to get {what}: {response.text}")
        return None

    def check_server(self) -> bool:
        """Check if the server is running."""
        try:
            response = self.session.get(f"{self.base_url}/health", timeout=2)
        except requests.exceptions.RequestException:
            response = None
        if response is not None and response.status_code == 200:
            print(f"{_OK_CHAR} Server is running")
            return True
        print(f"{_FAIL_CHAR} Server is not running!")
        print("\nPlease start the server first:")
        print("  python -m unireg.main --port 8000")
        return False

    def create_student(self, full_name, faculty, year, group_number, status="active"):
        """Enroll a new student."""
        student = self._post("/students", {
            "full_name": full_name,
            "faculty": faculty,
            "year": year,
            "group_number": group_number,
            "status": status,
        }, f"student {full_name}")
        if student:
            print(f"{_OK_CHAR} Created student: {full_name} (id={student['id']})")
        return student

    def create_course(self, name, course_type, credits, semester, faculty, max_students):
        """Add a new course."""
        course = self._post("/courses", {
            "name": name,
            "course_type": course_type,
            "credits": credits,
            "semester": semester,
            "faculty": faculty,
            "max_students": max_students,
        }, f"course {name}")
        if course:
            print(f"{_OK_CHAR} Created course: {name} (id={course['id']})")
        return course

    def register(self, student_id, course_id):
        """Register a student for a course."""
        result = self._post("/registrations", {
            "student_id": student_id,
            "course_id": course_id,
        }, f"registration {student_id}->{course_id}")
        if result:
            print(f"{_OK_CHAR} Registered student {student_id} for course {course_id}")
        return result

    def grade(self, student_id, course_id, grade):
        """Record a grade."""
        result = self._post("/grades", {
            "student_id": student_id,
            "course_id": course_id,
            "grade": grade,
        }, f"grade {student_id}->{course_id}")
        if result:
            print(f"{_OK_CHAR} Graded student {student_id} in course {course_id}: {grade}")
        return result

    def list_students(self):
        """List all students."""
        students = self._get("/students", "students") or []
        print(f"\n{'='*60}")
        print(f"Students ({len(students)})")
        print(f"{'='*60}")
        for student in students:
            print(f"  {student['id']:4} | {student['full_name']:20} | {student['faculty']:16} | {student['status']}")
        return students

    def list_courses(self):
        """List all courses."""
        courses = self._get("/courses", "courses") or []
        print(f"\n{'='*60}")
        print(f"Courses ({len(courses)})")
        print(f"{'='*60}")
        for course in courses:
            print(f"  {course['id']:4} | {course['name']:30} | {course['faculty']:16} | max {course['max_students']}")
        return courses

    def get_statistics(self):
        """Get registry statistics."""
        stats = self._get("/statistics", "statistics")
        if stats is not None:
            print(f"\n{'='*60}")
            print("Registry Statistics")
            print(f"{'='*60}")
            print(json.dumps(stats, indent=2))
        return stats


def seed(client: SeedClient) -> Dict[str, Any]:
    """Add the sample data set and return what was created."""
    print("Creating students...")
    students = [client.create_student(*row) for row in SAMPLE_STUDENTS]

    print("\nCreating courses...")
    courses = [client.create_course(*row) for row in SAMPLE_COURSES]

    print("\nRegistering students...")
    plan = [(0, 0), (1, 0), (5, 0), (0, 1), (1, 1), (2, 2), (3, 3), (4, 4)]
    registered = []
    for s, c in plan:
        if students[s] and courses[c]:
            if client.register(students[s]['id'], courses[c]['id']):
                registered.append((students[s]['id'], courses[c]['id']))

    # One over capacity: Operating Systems only has two places
    if students[5] and courses[1]:
        if client.register(students[5]['id'], courses[1]['id']) is None:
            print(f"{_WARN_CHAR} Course {courses[1]['name']} is full, as expected")

    print("\nGrading...")
    grades = [(0, 0, 5), (0, 1, 5), (1, 0, 4), (1, 1, 3), (2, 2, 4), (3, 3, 2), (4, 4, 5)]
    graded = 0
    for s, c, value in grades:
        if students[s] and courses[c] and client.grade(students[s]['id'], courses[c]['id'], value):
            graded += 1

    return {
        'students': [s for s in students if s],
        'courses': [c for c in courses if c],
        'registrations': registered,
        'grades': graded,
    }


def main(argv: Optional[List[str]] = None) -> int:
    """Main execution."""
    parser = argparse.ArgumentParser(description="Add sample data to a UniReg server")
    parser.add_argument("--base-url", type=str, help="Server base URL")
    args = parser.parse_args(argv)

    print("="*60)
    print("UniReg - Data Addition Script")
    print("="*60)
    print()

    client = SeedClient(args.base_url or detect_base_url())
    if not client.check_server():
        return 1

    print("\n" + "="*60)
    print("Adding Sample Data...")
    print("="*60 + "\n")

    seed(client)

    client.list_students()
    client.list_courses()
    client.get_statistics()

    print("\n" + "="*60)
    print(f"{_OK_CHAR} Sample data added successfully!")
    print("="*60)
    print("\nYou can now:")
    print(f"  - View API docs: {client.base_url}/docs")
    print(f"  - List students: curl {client.base_url}/students")
    print(f"  - Excellent students: curl '{client.base_url}/students/excellent?faculty=computer_science'")
    print(f"  - Get statistics: curl {client.base_url}/statistics")
    print()
    return 0


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print(f"\n\n{_FAIL_CHAR} Interrupted by user")
        sys.exit(1)
