"""
Main entry point for the UniReg platform.
"""

import argparse
import logging
from typing import Any, Dict, List, Optional

from .api.rest_api import RegistryRestAPI
from .config import PlatformConfig, load_config
from .core.enums import Faculty, StudentStatus, CourseType, Semester, Grade
from .core.exceptions import UniRegException, ConfigurationError
from .observability import setup_logging
from .services import Registry

logger = logging.getLogger(__name__)


class UniRegPlatform:
    """Main platform class wiring the registry to the REST API."""

    def __init__(self, config: Optional[PlatformConfig] = None, registry: Optional[Registry] = None):
        self._config = config or PlatformConfig()
        self._registry = registry or Registry()
        self._rest_api = RegistryRestAPI(self._registry)

        if self._config.load_sample_data:
            self.create_sample_data()

        logger.info("UniReg platform initialized")

    @property
    def config(self) -> PlatformConfig:
        return self._config

    @property
    def registry(self) -> Registry:
        return self._registry

    @property
    def app(self):
        return self._rest_api.app

    def start_rest_server(self):
        """Serve the REST API until interrupted."""
        import uvicorn

        logger.info("Starting REST server on %s:%d", self._config.host, self._config.port)
        uvicorn.run(
            self._rest_api.app,
            host=self._config.host,
            port=self._config.port,
            log_level=self._config.log_level.lower(),
        )

    def create_sample_data(self) -> Dict[str, List[Any]]:
        """Create sample data for demonstration."""
        registry = self._registry

        students = [
            registry.enroll_student("Alice Johnson", Faculty.COMPUTER_SCIENCE, 1, group_number="CS-11"),
            registry.enroll_student("Bob Smith", Faculty.COMPUTER_SCIENCE, 2, group_number="CS-21"),
            registry.enroll_student("Carol Davis", Faculty.ECONOMICS, 3, group_number="EC-31"),
            registry.enroll_student("Dan Brown", Faculty.LAW, 4, status=StudentStatus.ACADEMIC_LEAVE,
                                    group_number="LW-41"),
        ]

        courses = [
            registry.add_course("Introduction to Programming", CourseType.MANDATORY, 5,
                                Semester.FIRST, Faculty.COMPUTER_SCIENCE, 30),
            registry.add_course("Data Structures", CourseType.MANDATORY, 5,
                                Semester.SECOND, Faculty.COMPUTER_SCIENCE, 25),
            registry.add_course("Microeconomics", CourseType.MANDATORY, 4,
                                Semester.FIRST, Faculty.ECONOMICS, 40),
            registry.add_course("Legal Rhetoric", CourseType.SPECIAL, 2,
                                Semester.SECOND, Faculty.LAW, 10),
        ]

        registry.register_for_course(students[0].id, courses[0].id)
        registry.register_for_course(students[1].id, courses[0].id)
        registry.register_for_course(students[2].id, courses[2].id)

        registry.set_grade(students[0].id, courses[0].id, Grade.EXCELLENT)
        registry.set_grade(students[1].id, courses[0].id, Grade.GOOD)
        registry.set_grade(students[2].id, courses[2].id, Grade.SATISFACTORY)

        logger.info("Sample data created")
        return {'students': students, 'courses': courses}

    def run_demo(self) -> Dict[str, Any]:
        """Run a demonstration of the registry rules on the console."""
        registry = self._registry
        outcomes: Dict[str, Any] = {}

        print("=== Enrollment ===")
        first = registry.enroll_student("Ada Lovelace", Faculty.COMPUTER_SCIENCE, 1, group_number="CS-12")
        second = registry.enroll_student("Alan Turing", Faculty.COMPUTER_SCIENCE, 1, group_number="CS-12")
        seminar = registry.add_course("Compilers Seminar", CourseType.SPECIAL, 3,
                                      Semester.FIRST, Faculty.COMPUTER_SCIENCE, 1)
        print(f"Enrolled {first.full_name} (id={first.id}) and {second.full_name} (id={second.id})")
        print(f"Added course {seminar.name} with {seminar.max_students} place")

        print("\n=== Registration ===")
        for student in (first, second):
            try:
                registry.register_for_course(student.id, seminar.id)
                print(f"✓ {student.full_name} registered")
                outcomes[student.full_name] = "registered"
            except UniRegException as e:
                print(f"✗ {student.full_name}: {e.message}")
                outcomes[student.full_name] = e.error_code

        print("\n=== Grading ===")
        registry.set_grade(first.id, seminar.id, Grade.EXCELLENT)
        average = registry.calculate_average_grade(first.id)
        outcomes['average'] = average
        print(f"Average grade of {first.full_name}: {average}")

        excellent = registry.get_excellent_students_by_faculty(Faculty.COMPUTER_SCIENCE)
        outcomes['excellent'] = [s.id for s in excellent]
        print(f"Excellent students: {', '.join(s.full_name for s in excellent)}")

        print("\n=== Status ===")
        registry.update_student_status(first.id, StudentStatus.GRADUATED)
        try:
            registry.update_student_status(first.id, StudentStatus.ACTIVE)
        except UniRegException as e:
            outcomes['graduated_change'] = e.error_code
            print(f"✗ {e.message}")

        print(f"\nStatistics: {registry.get_statistics()}")
        return outcomes


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="UniReg University Registry")
    parser.add_argument("--host", type=str, help="REST server host")
    parser.add_argument("--port", type=int, help="REST server port")
    parser.add_argument("--demo", action="store_true", help="Run demo mode")
    parser.add_argument("--sample-data", action="store_true", default=None,
                        help="Load sample data before serving")
    parser.add_argument("--config", type=str, help="Configuration file path")
    parser.add_argument("--log-level", type=str.upper, help="Logging level")
    parser.add_argument("--log-format", choices=["json", "text"], help="Logging format")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args.config, {
            'host': args.host,
            'port': args.port,
            'log_level': args.log_level,
            'log_format': args.log_format,
            'load_sample_data': args.sample_data,
        })
    except ConfigurationError as e:
        print(f"Configuration error: {e.message}")
        return 2

    setup_logging(config.log_level, config.log_format)
    platform = UniRegPlatform(config)

    if args.demo:
        platform.run_demo()
        return 0

    try:
        platform.start_rest_server()
    except KeyboardInterrupt:
        logger.info("Shutting down")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
